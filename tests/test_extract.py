import io

import pytest

from parsers.errors import DocumentExtractionError, PdfExtractionError, UnsupportedFileType
from parsers.extract import extract_text
from parsers.pdf import pdf_to_text


def test_pdf_pages_are_joined_in_order(make_pdf):
    text = pdf_to_text(make_pdf("SQL and Python", "Power BI dashboards"))
    assert text.index("SQL and Python") < text.index("Power BI dashboards")
    assert "\n" in text


def test_pdf_accepts_file_like_and_path(make_pdf, tmp_path):
    data = make_pdf("Tableau reporting")
    assert "Tableau reporting" in pdf_to_text(io.BytesIO(data))

    path = tmp_path / "resume.pdf"
    path.write_bytes(data)
    assert "Tableau reporting" in pdf_to_text(str(path))


def test_pdf_without_text_layer_returns_empty(make_pdf):
    assert pdf_to_text(make_pdf("")) == ""


def test_unreadable_pdf_raises():
    with pytest.raises(PdfExtractionError):
        pdf_to_text(b"this is not a pdf at all")


def test_empty_pdf_raises():
    with pytest.raises(PdfExtractionError):
        pdf_to_text(b"")


def test_extract_dispatches_on_extension(make_pdf, make_docx):
    assert "Regression analysis" in extract_text("CV.PDF", make_pdf("Regression analysis"))

    docx_bytes = make_docx(["Jane Analyst", "Built KPI dashboards"], [("SQL", "Tableau")])
    text = extract_text("cv.docx", docx_bytes)
    assert "Built KPI dashboards" in text
    assert "SQL Tableau" in text

    assert extract_text("cv.txt", "Café metrics".encode("utf-8")) == "Café metrics"
    assert extract_text("cv.txt", "Café".encode("cp1252")) == "Café"


def test_extract_rejects_unknown_extension():
    with pytest.raises(UnsupportedFileType) as exc:
        extract_text("resume.exe", b"MZ")
    assert exc.value.extension == ".exe"


def test_extract_rejects_empty_upload():
    with pytest.raises(DocumentExtractionError):
        extract_text("resume.txt", b"")


def test_broken_docx_raises():
    with pytest.raises(DocumentExtractionError):
        extract_text("resume.docx", b"not a zip archive")
