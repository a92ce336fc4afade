#!/usr/bin/env python3
"""
Rebuild the textbook PDF index from the command line.

Usage:
   python scripts/build_index.py
   python scripts/build_index.py --pdf-dir pdfs --output pdf_index.json --backend blocks
"""

import sys
import argparse
import logging
from functools import partial
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from extractors.pdf_backends import extract_pdf_text
from server.config import Settings
from server.services.index_service import reindex


def main(argv=None):
    settings = Settings()

    parser = argparse.ArgumentParser(
        description="Extract text from every PDF and write the search index."
    )
    parser.add_argument('--pdf-dir', '-i', default=None,
                        help=f"Directory of textbook PDFs (default: {settings.pdf_dir})")
    parser.add_argument('--output', '-o', default=None,
                        help=f"Index JSON path (default: {settings.index_path})")
    parser.add_argument('--backend', choices=["text", "blocks"], default=settings.pdf_backend,
                        help="PyMuPDF extraction mode")
    parser.add_argument('--verbose', '-v', action='store_true')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    pdf_dir = Path(args.pdf_dir) if args.pdf_dir else settings.pdf_dir
    index_path = Path(args.output) if args.output else settings.index_path

    print("Building PDF index...")
    print(f"  PDFs:   {pdf_dir}")
    print(f"  Output: {index_path}")

    index = reindex(pdf_dir, index_path, partial(extract_pdf_text, backend=args.backend))

    print(f"\nDone. {len(index.documents)} PDF(s) indexed at {index.updated_at}.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
