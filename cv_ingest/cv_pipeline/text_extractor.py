"""
Extract raw text from uploaded CV files through an ordered cascade of backends.
In-memory only: no disk writes, no network.
"""

import re
import struct
import time
from contextlib import closing
from functools import partial
from io import BytesIO
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple, Union

from cv_ingest.exceptions import BackendFailure, OcrTimeout
from cv_ingest.schemas.raw_document import BackendAttempt, ExtractionBackend, ExtractionResult
from cv_ingest.schemas.settings import ParserSettings, get_default_settings
from cv_ingest.utils.logger import get_logger

logger = get_logger(__name__)

TEXT, PDF, DOCX, DOC, IMAGE, UNKNOWN = "text", "pdf", "docx", "doc", "image", "unknown"

DOCUMENT_TYPES: Dict[str, str] = {
    TEXT: "Text",
    PDF: "PDF",
    DOCX: "Word Document",
    DOC: "Word Document",
    IMAGE: "Image",
    UNKNOWN: "Unknown",
}

_EXTENSION_FORMATS = {
    ".txt": TEXT, ".text": TEXT, ".md": TEXT, ".csv": TEXT,
    ".pdf": PDF,
    ".docx": DOCX,
    ".doc": DOC, ".rtf": DOC,
    ".png": IMAGE, ".jpg": IMAGE, ".jpeg": IMAGE, ".tif": IMAGE, ".tiff": IMAGE, ".bmp": IMAGE,
}

_MIME_FORMATS = (
    ("application/pdf", PDF),
    ("application/vnd.openxmlformats-officedocument.wordprocessingml", DOCX),
    ("application/msword", DOC),
    ("application/rtf", DOC),
    ("text/", TEXT),
    ("image/", IMAGE),
)

_CID_ARTIFACT = re.compile(r"\(cid:\d+\)")
_PRINTABLE_RUN = re.compile(r"[\t\n\r\x20-\x7e\xa0-\xff]{4,}")
_WORD = re.compile(r"[A-Za-z]{2,}")
_PHRASE = re.compile(r"\b[A-Za-z]{2,}[ \t]+[A-Za-z]{2,}[ \t]+[A-Za-z]{2,}\b")
_W_NS = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"

# Word 97+ binary format (MS-DOC): FIB identifier, flag bits and the Clx slot in FibRgFcLcb97
_WORD_IDENT = 0xA5EC
_FIB_ENCRYPTED = 0x0100
_FIB_WHICH_TABLE = 0x0200
_FIB_CLX_INDEX = 33
_FIELD_INSTRUCTION = re.compile(r"\x13[^\x13\x14\x15]*\x14")
_FIELD_MARK = re.compile(r"[\x13\x14\x15]")
_WORD_BREAKS = re.compile(r"[\r\n\x07\x0b\x0c]")
_WORD_CONTROL = re.compile(r"[\x00-\x08\x0e-\x1f]")


class _Extracted(NamedTuple):
    """Backend output plus the tier or encoding that produced it."""

    text: str
    detail: Optional[str] = None


def _sniff(content: bytes) -> str:
    """Guess a format from magic bytes."""
    head = content[:8]
    if head.startswith(b"%PDF"):
        return PDF
    if head.startswith(b"PK\x03\x04"):
        return DOCX
    if head.startswith(b"\xd0\xcf\x11\xe0"):
        return DOC
    if head.startswith(b"\x89PNG") or head.startswith(b"\xff\xd8\xff"):
        return IMAGE
    if content and b"\x00" not in content[:1024]:
        try:
            content.decode("utf-8")
            return TEXT
        except UnicodeDecodeError:
            pass
    return UNKNOWN


def detect_format(declared_mime_type: str, file_extension: str, content: bytes = b"") -> str:
    """
    Resolve the document format: extension first, then declared MIME type,
    then magic bytes. Returns one of text, pdf, docx, doc, image, unknown.
    """
    ext = (file_extension or "").strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    if ext in _EXTENSION_FORMATS:
        return _EXTENSION_FORMATS[ext]
    mime = (declared_mime_type or "").strip().lower()
    for prefix, fmt in _MIME_FORMATS:
        if mime.startswith(prefix):
            return fmt
    return _sniff(content or b"")


def _extract_plain(content: bytes, settings: ParserSettings) -> str:
    """Strict UTF-8 decode; a BOM is dropped."""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise BackendFailure(ExtractionBackend.PLAIN.value, f"not valid UTF-8 ({e.reason})") from e


def _extract_pdf(content: bytes, settings: ParserSettings) -> str:
    """Extract the PDF text layer using pdfplumber. Scanned PDFs yield nothing."""
    try:
        import pdfplumber
    except ImportError:
        logger.warning("pdfplumber not installed; install with: pip install pdfplumber")
        raise BackendFailure(ExtractionBackend.PDF_TEXT.value, "pdfplumber not installed")
    with pdfplumber.open(BytesIO(content)) as pdf:
        parts = []
        for page in pdf.pages:
            ptext = page.extract_text()
            if ptext:
                parts.append(_CID_ARTIFACT.sub("", ptext))
        return "\n".join(parts)


def _docx_text_boxes(element) -> List[str]:
    """Paragraph text inside floating text boxes (w:txbxContent), which python-docx does not expose."""
    out = []
    for box in element.iter(_W_NS + "txbxContent"):
        for para in box.iter(_W_NS + "p"):
            text = "".join(t.text or "" for t in para.iter(_W_NS + "t"))
            if text.strip():
                out.append(text)
    return out


def _extract_docx(content: bytes, settings: ParserSettings) -> str:
    """Extract DOCX text using python-docx: body, tables, headers/footers and text boxes."""
    try:
        from docx import Document
    except ImportError:
        logger.warning("python-docx not installed; install with: pip install python-docx")
        raise BackendFailure(ExtractionBackend.DOCX_TEXT.value, "python-docx not installed")

    doc = Document(BytesIO(content))
    parts: List[str] = []
    for section in doc.sections:
        parts.extend(p.text for p in section.header.paragraphs if p.text.strip())
    parts.extend(p.text for p in doc.paragraphs if p.text.strip())
    for table in doc.tables:
        for row in table.rows:
            row_texts: List[str] = []
            for cell in row.cells:
                # merged cells repeat across the row
                if cell.text.strip() and cell.text not in row_texts:
                    row_texts.append(cell.text)
            parts.extend(row_texts)
    seen = set(parts)
    for text in _docx_text_boxes(doc.element.body):
        if text not in seen:
            seen.add(text)
            parts.append(text)
    for section in doc.sections:
        parts.extend(p.text for p in section.footer.paragraphs if p.text.strip())
    return "\n".join(parts)


def _salvage_runs(raw: str) -> List[str]:
    pieces = []
    for run in _PRINTABLE_RUN.findall(raw):
        run = run.strip()
        if _WORD.search(run):
            pieces.append(run)
    return pieces


def _salvage_text(data: bytes) -> Optional[Tuple[str, str]]:
    """(text, encoding) of printable runs, trying latin-1 then UTF-16LE; None when only noise is found."""
    for encoding in ("latin-1", "utf-16-le"):
        pieces = _salvage_runs(data.decode(encoding, errors="ignore"))
        if any(_PHRASE.search(p) for p in pieces):
            return "\n".join(pieces), encoding
    return None


def _extract_generic(content: bytes, settings: ParserSettings) -> _Extracted:
    """
    Last-resort salvage from any byte stream (non-OLE legacy files, odd encodings).
    Keeps printable runs from a latin-1 decode, retrying as UTF-16LE for Word 97 text.
    Output without a single three-word phrase is treated as binary noise.
    """
    salvaged = _salvage_text(content)
    if not salvaged:
        raise BackendFailure(ExtractionBackend.GENERIC_FALLBACK.value, "no readable text found")
    return _Extracted(*salvaged)


def _word_piece_text(word: bytes, table: bytes) -> str:
    """Document text from the Word 97+ piece table (Clx in the table stream)."""
    pos = 32
    csw = struct.unpack_from("<H", word, pos)[0]
    pos += 2 + csw * 2
    cslw = struct.unpack_from("<H", word, pos)[0]
    pos += 2 + cslw * 4
    pairs = struct.unpack_from("<H", word, pos)[0]
    if pairs <= _FIB_CLX_INDEX:
        raise ValueError("FIB has no Clx entry")
    fc_clx, lcb_clx = struct.unpack_from("<II", word, pos + 2 + _FIB_CLX_INDEX * 8)
    clx = table[fc_clx: fc_clx + lcb_clx]

    i = 0
    while i < len(clx) and clx[i] == 0x01:  # Prc: property modifiers, skipped
        i += 3 + struct.unpack_from("<h", clx, i + 1)[0]
    if i >= len(clx) or clx[i] != 0x02:
        raise ValueError("no piece table in Clx")
    lcb = struct.unpack_from("<I", clx, i + 1)[0]
    plc = clx[i + 5: i + 5 + lcb]
    count = (len(plc) - 4) // 12
    cps = struct.unpack_from(f"<{count + 1}I", plc, 0)

    pieces = []
    for n in range(count):
        fc = struct.unpack_from("<I", plc, 4 * (count + 1) + n * 8 + 2)[0]
        length = cps[n + 1] - cps[n]
        if fc & 0x40000000:
            start = (fc & 0x3FFFFFFF) // 2
            pieces.append(word[start: start + length].decode("cp1252", errors="replace"))
        else:
            pieces.append(word[fc: fc + 2 * length].decode("utf-16-le", errors="replace"))
    return "".join(pieces)


def _word_markup_to_lines(text: str) -> str:
    """Drop field instructions and control marks; paragraph and cell marks become line breaks."""
    text = _FIELD_INSTRUCTION.sub("", text)
    text = _FIELD_MARK.sub("", text)
    lines = (line.strip() for line in _WORD_BREAKS.split(text))
    return "\n".join(_WORD_CONTROL.sub("", line) for line in lines if line)


def _extract_ole_doc(content: bytes, settings: ParserSettings) -> _Extracted:
    """
    Legacy Word (.doc) text through olefile.
    Reads the piece table first; without one, salvages printable runs from the
    WordDocument stream only, never from the whole compound file.
    """
    try:
        import olefile
    except ImportError:
        logger.warning("olefile not installed; install with: pip install olefile")
        raise BackendFailure(ExtractionBackend.OLE_DOC.value, "olefile not installed")
    try:
        ole = olefile.OleFileIO(BytesIO(content))
    except OSError as e:
        raise BackendFailure(ExtractionBackend.OLE_DOC.value, f"not an OLE2 compound file ({e})") from e
    try:
        if not ole.exists("WordDocument"):
            raise BackendFailure(ExtractionBackend.OLE_DOC.value, "no WordDocument stream")
        word = ole.openstream("WordDocument").read()
        table_name = None
        if len(word) >= 32 and struct.unpack_from("<H", word, 0)[0] == _WORD_IDENT:
            flags = struct.unpack_from("<H", word, 0x0A)[0]
            if flags & _FIB_ENCRYPTED:
                raise BackendFailure(ExtractionBackend.OLE_DOC.value, "document is encrypted")
            table_name = "1Table" if flags & _FIB_WHICH_TABLE else "0Table"
        if table_name and ole.exists(table_name):
            try:
                text = _word_markup_to_lines(_word_piece_text(word, ole.openstream(table_name).read()))
            except (ValueError, struct.error) as e:
                logger.debug("Piece table unreadable, salvaging WordDocument stream: %s", e)
                text = ""
            if text.strip():
                return _Extracted(text, "piece_table")
        salvaged = _salvage_text(word)
        if not salvaged:
            raise BackendFailure(ExtractionBackend.OLE_DOC.value, "no readable text in WordDocument stream")
        return _Extracted(salvaged[0], "word_stream")
    finally:
        ole.close()


def _ocr_images(content: bytes, fmt: str, settings: ParserSettings):
    """Yield Pillow images to OCR: rendered PDF pages or the uploaded image itself."""
    from PIL import Image

    if fmt == IMAGE:
        yield Image.open(BytesIO(content)).convert("L")
        return
    if fmt != PDF:
        raise BackendFailure(ExtractionBackend.OCR.value, f"cannot render {fmt} documents")

    import fitz  # PyMuPDF

    doc = fitz.open(stream=content, filetype="pdf")
    try:
        mat = fitz.Matrix(settings.ocr_zoom, settings.ocr_zoom)
        for index, page in enumerate(doc):
            if index >= settings.ocr_max_pages:
                break
            pix = page.get_pixmap(matrix=mat, alpha=False)
            yield Image.open(BytesIO(pix.tobytes("png"))).convert("L")
    finally:
        doc.close()


def _extract_ocr(content: bytes, settings: ParserSettings, fmt: str = UNKNOWN) -> str:
    """
    OCR fallback using PyMuPDF rasterization + pytesseract.
    Bounded by settings.ocr_timeout_seconds across all pages.
    """
    if not settings.ocr_enabled:
        raise BackendFailure(ExtractionBackend.OCR.value, "OCR disabled")
    try:
        import pytesseract
    except ImportError:
        logger.warning("pytesseract not installed; install with: pip install pytesseract")
        raise BackendFailure(ExtractionBackend.OCR.value, "pytesseract not installed")

    deadline = time.monotonic() + settings.ocr_timeout_seconds
    texts = []
    with closing(_ocr_images(content, fmt, settings)) as images:
        for img in images:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise OcrTimeout(settings.ocr_timeout_seconds)
            try:
                txt = pytesseract.image_to_string(img, lang=settings.ocr_language, timeout=remaining)
            except RuntimeError as e:
                # pytesseract signals a killed tesseract process with RuntimeError
                if "timeout" in str(e).lower():
                    raise OcrTimeout(settings.ocr_timeout_seconds) from e
                raise
            if txt and txt.strip():
                texts.append(txt)
    return "\n".join(texts)


_Backend = Callable[[bytes, ParserSettings], Union[str, _Extracted]]


def _plan(fmt: str) -> List[Tuple[ExtractionBackend, _Backend]]:
    """Backends to try for a format, in order. OCR always comes last."""
    ocr = partial(_extract_ocr, fmt=fmt)
    if fmt == TEXT:
        steps = [(ExtractionBackend.PLAIN, _extract_plain), (ExtractionBackend.GENERIC_FALLBACK, _extract_generic)]
    elif fmt == PDF:
        steps = [(ExtractionBackend.PDF_TEXT, _extract_pdf)]
    elif fmt == DOCX:
        steps = [(ExtractionBackend.DOCX_TEXT, _extract_docx)]
    elif fmt == DOC:
        steps = [(ExtractionBackend.OLE_DOC, _extract_ole_doc), (ExtractionBackend.GENERIC_FALLBACK, _extract_generic)]
    elif fmt == IMAGE:
        steps = []
    else:
        steps = [(ExtractionBackend.GENERIC_FALLBACK, _extract_generic)]
    return steps + [(ExtractionBackend.OCR, ocr)]


def extract_text(
    content: bytes,
    declared_mime_type: str = "",
    file_extension: str = "",
    settings: Optional[ParserSettings] = None,
) -> ExtractionResult:
    """
    Run the extraction cascade and return the first non-empty text.
    Backend errors are logged and recorded, never raised.
    All backends failing gives ExtractionResult(success=False, text="").
    """
    settings = settings or get_default_settings()
    content = content or b""
    fmt = detect_format(declared_mime_type, file_extension, content)
    attempts: List[BackendAttempt] = []

    if not content:
        logger.info("Empty document; nothing to extract")
        return ExtractionResult(text="", backend_used=None, success=False, attempts=attempts)

    for backend, run in _plan(fmt):
        started = time.perf_counter()
        detail = None
        try:
            out = run(content, settings)
            text, detail = out if isinstance(out, _Extracted) else (out, None)
            error = None if text and text.strip() else "no text extracted"
        except BackendFailure as e:
            text, error = "", e.message
        except Exception as e:
            text, error = "", f"{type(e).__name__}: {e}"
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        if error is None:
            attempts.append(
                BackendAttempt(backend=backend, succeeded=True, detail=detail, chars=len(text), duration_ms=duration_ms)
            )
            logger.info(
                "Extracted %d chars from %s document via %s%s",
                len(text), fmt, backend.value, f" ({detail})" if detail else "",
            )
            return ExtractionResult(text=text, backend_used=backend, success=True, attempts=attempts)

        attempts.append(BackendAttempt(backend=backend, succeeded=False, error=error, duration_ms=duration_ms))
        logger.warning("Backend %s failed for %s document: %s", backend.value, fmt, error)

    logger.info("All extraction backends failed for %s document", fmt)
    return ExtractionResult(text="", backend_used=None, success=False, attempts=attempts)
