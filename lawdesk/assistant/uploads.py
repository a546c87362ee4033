"""Filtrage des pièces envoyées à l'assistant: PDF, DOCX, DOC ou TXT, 5 fichiers au plus par envoi."""
from typing import List, Optional, Sequence, Tuple

ALLOWED_TYPES = (
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
    "text/plain",
)
ALLOWED_EXTENSIONS = (".pdf", ".docx", ".doc", ".txt")
MAX_FILES = 5

NO_VALID_FILES = "Please select PDF, DOCX, DOC, or TXT files only."
TOO_MANY_FILES = "You can upload a maximum of 5 files at once."

class UploadRejectedError(ValueError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

def is_accepted(file_name: Optional[str], content_type: Optional[str]) -> bool:
    # Type MIME ou extension, l'un suffit
    name = (file_name or "").lower()
    extension = name[name.rfind("."):] if "." in name else ""
    return (content_type or "") in ALLOWED_TYPES or extension in ALLOWED_EXTENSIONS

def select_files(files: Sequence[Tuple[str, bytes, str]]) -> List[Tuple[str, bytes, str]]:
    """Garde les fichiers acceptés; refuse un envoi vide après filtrage ou de plus de MAX_FILES fichiers."""
    valid = [f for f in files if is_accepted(f[0], f[2])]
    if not valid:
        raise UploadRejectedError(NO_VALID_FILES)
    if len(valid) > MAX_FILES:
        raise UploadRejectedError(TOO_MANY_FILES)
    return valid
