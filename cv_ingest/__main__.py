"""Parse a CV file from the command line and print the outcome as JSON. Use: python -m cv_ingest resume.pdf"""

import argparse
import logging
import mimetypes
import sys
from pathlib import Path
from typing import List, Optional

from cv_ingest.cv_pipeline.cv_parser import parse_document
from cv_ingest.schemas.settings import ParserSettings, load_settings
from cv_ingest.utils.logger import get_logger

logger = get_logger("cv_ingest.cli")

EXIT_OK = 0
EXIT_UNREADABLE = 1
EXIT_UNEXTRACTABLE = 2


def _probability(value: str) -> float:
    number = float(value)
    if not 0.0 <= number <= 1.0:
        raise argparse.ArgumentTypeError(f"{value} is not between 0 and 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cv_ingest", description="Parse a résumé into structured JSON")
    parser.add_argument("path", help="Path to a TXT, PDF, DOC, DOCX or image file")
    parser.add_argument("--mime", default="", help="Declared MIME type (guessed from the name if omitted)")
    parser.add_argument("--settings", default=None, help="JSON file with ParserSettings overrides")
    ocr = parser.add_mutually_exclusive_group()
    ocr.add_argument("--ocr", dest="ocr", action="store_true", default=None, help="Enable the OCR fallback")
    ocr.add_argument("--no-ocr", dest="ocr", action="store_false", help="Disable the OCR fallback")
    parser.add_argument("--threshold", type=_probability, default=None, help="Name confidence threshold (0-1)")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def _route_logs_to_stderr(debug: bool) -> None:
    """Stdout carries the JSON; package log handlers write to stderr instead."""
    for name in list(logging.root.manager.loggerDict):
        if not name.startswith("cv_ingest"):
            continue
        pkg_logger = logging.getLogger(name)
        if debug:
            pkg_logger.setLevel(logging.DEBUG)
        for handler in pkg_logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                handler.setStream(sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _route_logs_to_stderr(args.debug)

    path = Path(args.path)
    try:
        content = path.read_bytes()
    except OSError as e:
        logger.error("Cannot read %s: %s", path, e)
        return EXIT_UNREADABLE

    settings = load_settings(args.settings)
    updates = {}
    if args.ocr is not None:
        updates["ocr_enabled"] = args.ocr
    if args.threshold is not None:
        updates["name_confidence_threshold"] = args.threshold
    if updates:
        settings = ParserSettings.model_validate({**settings.model_dump(), **updates})

    mime = args.mime or mimetypes.guess_type(path.name)[0] or ""
    outcome = parse_document(content, mime, path.suffix, file_name=path.name, settings=settings)
    sys.stdout.write(outcome.model_dump_json(indent=args.indent) + "\n")
    return EXIT_OK if outcome.success else EXIT_UNEXTRACTABLE


if __name__ == "__main__":
    sys.exit(main())
