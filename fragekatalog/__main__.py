"""
Module entry point for: python -m fragekatalog

Allows running the parser directly as a module:
    python -m fragekatalog parse <pdf_path> [options]
    python -m fragekatalog batch <directory> [options]
"""

from .cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
