"""
Nettoyage du texte généré avant export (PDF / DOCX / TXT).
Le contenu arrive en markdown léger: on retire la mise en forme et on normalise les blancs.
"""
import re
from typing import List

DEFAULT_TITLE = "Document"

# Ordre significatif: gras avant italique, liens avant images (comportement historique conservé)
_MARKDOWN_RULES = [
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"^#{1,6}\s+", re.M), ""),
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"~~(.*?)~~"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"!\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"^[-*_]{3,}$", re.M), ""),
    (re.compile(r"^>\s+", re.M), ""),
    (re.compile(r"^[-*+]\s+", re.M), ""),
    (re.compile(r"^\d+\.\s+", re.M), ""),
    (re.compile(r"_(.*?)_"), r"\1"),
    (re.compile(r"__(.*?)__"), r"\1"),
]
_BLANK_RUNS = re.compile(r"\n\s*\n\s*\n")

def format_document_content(content: str) -> str:
    """Retire le markdown, réduit les suites de lignes vides et trim chaque ligne."""
    if not content:
        return ""
    text = content
    for pattern, repl in _MARKDOWN_RULES:
        text = pattern.sub(repl, text)
    text = _BLANK_RUNS.sub("\n\n", text)
    return "\n".join(line.strip() for line in text.split("\n")).strip()

def split_into_paragraphs(content: str) -> List[str]:
    return [p.strip() for p in (content or "").split("\n\n") if p.strip()]

def extract_title(content: str) -> str:
    """Première ligne non vide, sinon "Document"."""
    for line in (content or "").split("\n"):
        if line.strip():
            return line.strip()
    return DEFAULT_TITLE

def format_for_pdf(content: str) -> str:
    return "\n\n".join(split_into_paragraphs(content))

def format_for_docx(content: str) -> List[str]:
    return split_into_paragraphs(content)

def format_for_txt(content: str) -> str:
    return format_document_content(content)
