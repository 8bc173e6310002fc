import io
import logging
from pathlib import Path

import docx

from parsers.errors import DocumentExtractionError, UnsupportedFileType
from parsers.pdf import pdf_to_text

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt")
TEXT_ENCODINGS = ("utf-8", "latin-1", "cp1252")


def read_docx(data: bytes) -> str:
    """Extract paragraph text, then table cells, from a DOCX document."""
    try:
        document = docx.Document(io.BytesIO(data))
    except Exception as e:
        logger.error(f"Error reading DOCX: {e}")
        raise DocumentExtractionError(f"Could not read DOCX: {e}") from e

    lines = [para.text for para in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.append(" ".join(cell.text for cell in row.cells))
    return "\n".join(lines).strip()


def read_txt(data: bytes) -> str:
    for encoding in TEXT_ENCODINGS:
        try:
            return data.decode(encoding).strip()
        except UnicodeDecodeError:
            continue
    raise DocumentExtractionError("Unable to decode file with supported encodings")


def extract_text(filename: str, data: bytes) -> str:
    """Extract resume text from an uploaded file based on its extension."""
    extension = Path(filename or "").suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileType(extension)
    if not data:
        raise DocumentExtractionError(f"Uploaded file {filename} is empty.")

    logger.info(f"Reading {extension} upload ({len(data)} bytes)")
    if extension == ".pdf":
        return pdf_to_text(data)
    if extension == ".docx":
        return read_docx(data)
    return read_txt(data)
