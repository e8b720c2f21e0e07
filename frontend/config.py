import os

API_URL = os.getenv("API_URL", "http://localhost:8000")

APP_NAME = "Console d'Administration"

# Choices offered by the edit form, None means "Aucune"
YEAR_OPTIONS = [None, "1ère Année", "2ème Année", "3ème Année"]

PAGE_SIZE_OPTIONS = [15, 25, 50, 100]
DEFAULT_PAGE_SIZE = 25
