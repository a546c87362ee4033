from datetime import datetime, timezone
from io import BytesIO

import docx
import pytest
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt

from lawdesk.documents import exporter

CONTENT = "# Lease Agreement\n\nThe **tenant** agrees to pay rent.\n\nThe landlord agrees to repairs & upkeep <promptly>."

def test_pdf_export_is_a_pdf():
    data = exporter.export_document(CONTENT, "pdf")
    assert data.startswith(b"%PDF")
    assert len(data) > 500

def test_docx_export_layout():
    data = exporter.export_document(CONTENT, "docx")
    doc = docx.Document(BytesIO(data))

    paragraphs = [p for p in doc.paragraphs if p.text]
    heading = paragraphs[0]
    assert heading.text == "Lease Agreement"
    assert heading.style.name == "Heading 1"
    assert heading.alignment == WD_ALIGN_PARAGRAPH.CENTER

    body = paragraphs[1:]
    # Le titre reste aussi le premier paragraphe du corps
    assert [p.text for p in body] == [
        "Lease Agreement",
        "The tenant agrees to pay rent.",
        "The landlord agrees to repairs & upkeep <promptly>.",
    ]
    for p in body:
        assert p.alignment == WD_ALIGN_PARAGRAPH.JUSTIFY
        assert p.paragraph_format.first_line_indent == Inches(0.5)
        assert p.runs[0].font.name == "Times New Roman"
        assert p.runs[0].font.size == Pt(12)
    assert doc.sections[0].left_margin == Inches(1)

def test_txt_export_is_cleaned_utf8():
    data = exporter.export_document("**Café** contract", "txt")
    assert data == "Café contract".encode("utf-8")

def test_format_is_case_insensitive():
    assert exporter.export_document("x", "TXT") == b"x"

@pytest.mark.parametrize("fmt", ["rtf", "", None])
def test_unsupported_format(fmt):
    with pytest.raises(exporter.UnsupportedFormatError):
        exporter.export_document("x", fmt)

def test_media_types():
    assert exporter.MEDIA_TYPES["pdf"] == "application/pdf"
    assert exporter.MEDIA_TYPES["docx"].endswith("wordprocessingml.document")
    assert set(exporter.FORMATS) == {"pdf", "docx", "txt"}

def test_generate_file_name_uses_title_and_utc_date():
    content = "Lease Agreement: Draft!\nbody"
    assert exporter.generate_file_name(content, "pdf", "2025-03-04T23:30:00-02:00") == "Lease-Agreement-Draft-2025-03-05.pdf"
    assert exporter.generate_file_name(content, "docx", datetime(2025, 1, 2, tzinfo=timezone.utc)) == "Lease-Agreement-Draft-2025-01-02.docx"

def test_generate_file_name_without_date():
    assert exporter.generate_file_name("Notes", "txt") == "Notes-.txt"
    assert exporter.generate_file_name("Notes", "txt", "not a date") == "Notes-.txt"
    assert exporter.generate_file_name("", "txt") == "Document-.txt"
