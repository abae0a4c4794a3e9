# main.py
import sys
import argparse
from PySide6.QtWidgets import QApplication

from config import APP_NAME, APP_VERSION, SUPPORTED_LANGUAGES, load_settings, apply_defaults
from logger import logger
from ui import MainWindow


def main():
    parser = argparse.ArgumentParser(description=f"{APP_NAME} PDF batch encrypt/decrypt")
    parser.add_argument("files", nargs="*", help="PDF files or folders to load into the list")
    parser.add_argument("--lang", choices=sorted(SUPPORTED_LANGUAGES), help="UI language")
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")

    args = parser.parse_args()

    settings = apply_defaults(load_settings())
    if args.lang:
        settings["language"] = args.lang

    app = QApplication(sys.argv[:1])
    window = MainWindow(settings)
    if args.files:
        window.process_imported_paths(args.files)
    window.show()
    logger.info(f"{APP_NAME} 应用启动")
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
