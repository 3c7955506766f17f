import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]


class Config:
    # Flask
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    # Cookies de sessão mais seguros (configuráveis por ENV)
    SESSION_COOKIE_HTTPONLY = bool(int(os.environ.get("SESSION_COOKIE_HTTPONLY", "1")))
    SESSION_COOKIE_SECURE = bool(int(os.environ.get("SESSION_COOKIE_SECURE", "0")))  # 1 em prod HTTPS
    SESSION_COOKIE_SAMESITE = os.environ.get("SESSION_COOKIE_SAMESITE", "Lax")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # BACEN – SGS (Sistema Gerenciador de Séries Temporais)
    BCB_SGS_BASE = os.environ.get("BCB_SGS_BASE", "https://api.bcb.gov.br/dados/serie")
    BCB_TIMEOUT = float(os.environ.get("BCB_TIMEOUT", "30"))

    # Margem permitida sobre a taxa base (em %), guardada como string
    DEFAULT_MARGIN_PERCENT = os.environ.get("DEFAULT_MARGIN_PERCENT", "30")
    PREFERENCES_PATH = os.environ.get("PREFERENCES_PATH", str(BASE_DIR / "data" / "preferences.json"))

    # Catálogo estático de séries (código -> descrição)
    SERIES_CATALOG_PATH = os.environ.get("SERIES_CATALOG_PATH", str(BASE_DIR / "data" / "series_catalog.json"))
    SERIES_SEARCH_LIMIT = int(os.environ.get("SERIES_SEARCH_LIMIT", "50"))
