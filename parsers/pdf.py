import io
import logging

import fitz  # PyMuPDF
from PyPDF2 import PdfReader

from parsers.errors import PdfExtractionError

logger = logging.getLogger(__name__)


def _read_source(source) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, str):
        with open(source, "rb") as f:
            return f.read()
    # file-like object (Streamlit / FastAPI uploads)
    if hasattr(source, "seek"):
        source.seek(0)
    return source.read()


def _pymupdf_pages(data: bytes):
    with fitz.open(stream=data, filetype="pdf") as doc:
        if doc.page_count == 0:
            raise ValueError("document has no pages")
        return [page.get_text("text") or "" for page in doc]


def _pypdf2_pages(data: bytes):
    reader = PdfReader(io.BytesIO(data))
    if not reader.pages:
        raise ValueError("document has no pages")
    return [page.extract_text() or "" for page in reader.pages]


def pdf_to_text(source) -> str:
    """
    Extract text from a PDF, one page after another.
    Works with file paths, raw bytes and in-memory file-like objects.

    PyMuPDF is tried first; PyPDF2 is the fallback for documents it cannot open
    or returns no text for. Raises PdfExtractionError only when neither backend
    can read the file at all; a readable PDF without a text layer yields "".
    """
    data = _read_source(source)
    if not data:
        raise PdfExtractionError("Uploaded PDF is empty.")

    failures = []
    opened = False
    for backend, read_pages in (("PyMuPDF", _pymupdf_pages), ("PyPDF2", _pypdf2_pages)):
        try:
            pages = read_pages(data)
        except Exception as e:
            logger.warning(f"[WARN] {backend} extraction failed: {e}")
            failures.append(f"{backend}: {e}")
            continue
        opened = True
        text = "\n".join(p.strip() for p in pages).strip()
        if text:
            logger.info(f"Extracted {len(text)} characters from {len(pages)} page(s) via {backend}")
            return text
        logger.info(f"{backend} opened the PDF but found no text")

    if not opened:
        raise PdfExtractionError("Could not read PDF (" + "; ".join(failures) + ")")
    logger.warning("[WARN] No text extracted from PDF")
    return ""
