# module lawdesk.app
"""Instance globale de l'application (construite par la factory)."""
from lawdesk.app_setup.factory import create_app

app = create_app()
