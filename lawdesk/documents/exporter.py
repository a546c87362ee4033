"""
Exports d'un document texte en fichiers téléchargeables.
- PDF: reportlab (platypus), titre gras 18pt, filet gris, corps 12pt avec retour à la ligne automatique
- DOCX: python-docx, titre Heading 1 centré, paragraphes justifiés Times New Roman 12pt,
  alinéa de première ligne 0.5", marges 1"
- TXT: texte nettoyé encodé en UTF-8
Le markdown est retiré avant chaque export (formatter.format_document_content).
"""
import re
from datetime import datetime, timezone
from io import BytesIO
from typing import Any, Dict, Optional
from xml.sax.saxutils import escape

from docx import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer

from . import formatter

MEDIA_TYPES: Dict[str, str] = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "txt": "text/plain; charset=utf-8",
}
FORMATS = tuple(MEDIA_TYPES)

class UnsupportedFormatError(ValueError):
    pass

def _pdf_markup(text: str) -> str:
    # Paragraph de reportlab interprète un sous-ensemble XML
    return escape(text).replace("\n", "<br/>")

def build_pdf(content: str) -> bytes:
    cleaned = formatter.format_document_content(content)
    title = formatter.extract_title(cleaned)

    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, rightMargin=57, leftMargin=57, topMargin=57, bottomMargin=57, title=title)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ExportTitle",
        parent=styles["Heading1"],
        fontName="Helvetica-Bold",
        fontSize=18,
        leading=22,
        spaceAfter=6,
    )
    body_style = ParagraphStyle(
        "ExportBody",
        parent=styles["Normal"],
        fontName="Helvetica",
        fontSize=12,
        leading=17,
        spaceAfter=8,
    )

    story = [
        Paragraph(_pdf_markup(title), title_style),
        HRFlowable(width="100%", thickness=0.5, color=colors.Color(200 / 255, 200 / 255, 200 / 255), spaceAfter=14),
    ]
    for para in formatter.format_for_pdf(cleaned).split("\n\n"):
        if para.strip():
            story.append(Paragraph(_pdf_markup(para), body_style))
            story.append(Spacer(1, 2))
    doc.build(story)
    data = buffer.getvalue()
    buffer.close()
    return data

def build_docx(content: str) -> bytes:
    cleaned = formatter.format_document_content(content)
    title = formatter.extract_title(cleaned)

    doc = DocxDocument()
    for section in doc.sections:
        section.top_margin = Inches(1)
        section.bottom_margin = Inches(1)
        section.left_margin = Inches(1)
        section.right_margin = Inches(1)

    heading = doc.add_heading(title, level=1)
    heading.alignment = WD_ALIGN_PARAGRAPH.CENTER
    heading.paragraph_format.space_before = Pt(10)
    heading.paragraph_format.space_after = Pt(20)

    for text in formatter.format_for_docx(cleaned):
        p = doc.add_paragraph()
        run = p.add_run(text)
        run.font.name = "Times New Roman"
        run.font.size = Pt(12)
        p.alignment = WD_ALIGN_PARAGRAPH.JUSTIFY
        p.paragraph_format.first_line_indent = Inches(0.5)
        p.paragraph_format.space_before = Pt(0)
        p.paragraph_format.space_after = Pt(12)

    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()

def build_txt(content: str) -> bytes:
    return formatter.format_for_txt(content).encode("utf-8")

_BUILDERS = {"pdf": build_pdf, "docx": build_docx, "txt": build_txt}

def export_document(content: str, fmt: str) -> bytes:
    builder = _BUILDERS.get((fmt or "").lower())
    if builder is None:
        raise UnsupportedFormatError(f"Unsupported format: {fmt}")
    return builder(content or "")

def _date_part(created_at: Any) -> str:
    if isinstance(created_at, datetime):
        value = created_at
    elif isinstance(created_at, str) and created_at.strip():
        try:
            value = datetime.fromisoformat(created_at.strip().replace("Z", "+00:00"))
        except ValueError:
            return ""
    else:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date().isoformat()

def generate_file_name(content: str, fmt: str, created_at: Optional[Any] = None) -> str:
    """<titre-nettoyé>-<YYYY-MM-DD>.<ext> (date vide si created_at absent ou illisible)."""
    title = formatter.extract_title(formatter.format_document_content(content or ""))
    clean = re.sub(r"[^a-zA-Z0-9\s-]", "", title).strip()
    clean = re.sub(r"\s+", "-", clean) or formatter.DEFAULT_TITLE
    return f"{clean}-{_date_part(created_at)}.{fmt}"
