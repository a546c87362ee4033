"""Moteur de templates Jinja2 partagé par les pages HTML."""
from fastapi.templating import Jinja2Templates
from lawdesk.config import TEMPLATES_DIR

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
