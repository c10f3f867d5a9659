"""CV ingestion pipeline: extraction cascade, normalization, parsing."""

from cv_ingest.cv_pipeline.cv_parser import parse_document, parse_raw_document, parse_text
from cv_ingest.cv_pipeline.text_extractor import detect_format, extract_text
from cv_ingest.cv_pipeline.text_normalizer import normalize

__all__ = [
    "parse_document",
    "parse_raw_document",
    "parse_text",
    "extract_text",
    "detect_format",
    "normalize",
]
