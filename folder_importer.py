import os

from config import SUPPORTED_EXTENSIONS
from logger import logger

def _is_supported(file_name):
    return file_name.lower().endswith(SUPPORTED_EXTENSIONS)

def import_from_folder(folder_path, include_hidden=False):
    """
    Recursively collect all PDF file paths from a folder.
    Parameters:
        - include_hidden: whether to include hidden files
    Returns:
        List of absolute PDF file paths, sorted for a stable display order
    """
    pdf_files = []
    for root, dirs, files in os.walk(folder_path):
        if not include_hidden:
            dirs[:] = [d for d in dirs if not d.startswith('.')]
        for file in sorted(files):
            if not include_hidden and file.startswith('.'):
                continue
            if _is_supported(file):
                pdf_files.append(os.path.abspath(os.path.join(root, file)))

    logger.info(f"Found {len(pdf_files)} PDF files in '{folder_path}'")
    return pdf_files

def filter_pdf_files(paths, include_hidden=False):
    """
    From a list of file/folder paths, return a flattened list of all PDF file paths.
    Order of the input is kept; folders expand in place.
    """
    all_pdfs = []
    for path in paths:
        path = os.fspath(path)
        if os.path.isfile(path) and _is_supported(path):
            if not include_hidden and os.path.basename(path).startswith('.'):
                continue
            all_pdfs.append(os.path.abspath(path))
        elif os.path.isdir(path):
            all_pdfs.extend(import_from_folder(path, include_hidden=include_hidden))

    logger.info(f"Filtered {len(all_pdfs)} PDF files from {len(paths)} input paths")
    return all_pdfs
