import os

from config import DECRYPT_SUFFIX, DecryptNaming
from models import TransformMode

def get_unique_filename(output_dir, base_name):
    """
    Return a unique file name by appending (1), (2), etc., if a file already exists.
    """
    name, ext = os.path.splitext(base_name)
    candidate = base_name
    i = 1
    while os.path.exists(os.path.join(output_dir, candidate)):
        candidate = f"{name} ({i}){ext}"
        i += 1
    return candidate

def suggest_output_filename(input_path, suffix=DECRYPT_SUFFIX):
    """
    Suggest an output filename based on input file path and suffix.
    e.g., "/path/doc.pdf" + " (no crypt)" -> "doc (no crypt).pdf"
    """
    base_name = os.path.basename(input_path)
    name, ext = os.path.splitext(base_name)
    return f"{name}{suffix}{ext or '.pdf'}"

def resolve_output_path(input_path, output_dir, mode, decrypt_naming=DecryptNaming.SUFFIX):
    """
    Determine the full output path for a given input file.
    - encrypt: original file name
    - decrypt: "<stem> (no crypt).pdf", or the original name when
      decrypt_naming is DecryptNaming.ORIGINAL
    Either way the name is made unique inside output_dir.
    """
    if mode == TransformMode.DECRYPT and DecryptNaming(decrypt_naming) == DecryptNaming.SUFFIX:
        base_name = suggest_output_filename(input_path)
    else:
        base_name = os.path.basename(input_path)

    return os.path.join(output_dir, get_unique_filename(output_dir, base_name))
