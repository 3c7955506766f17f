# app.py
from typing import Any, Mapping, Optional

import requests
from dotenv import load_dotenv
from flask import Flask

# carrega o .env antes do Config ler o ambiente (dev-friendly)
load_dotenv()  # carrega variáveis do .env, se existir
# Variáveis locais (não versionadas) – .env.local só preenche as ausentes
load_dotenv(dotenv_path=".env.local", override=False)

from application.comparison_service import RateComparisonService  # noqa: E402
from application.lookup_tracker import TokenRegistry  # noqa: E402
from application.preferences import MarginPreferenceStore  # noqa: E402
from core.config import Config  # noqa: E402
from core.logging_config import configure_logging  # noqa: E402
from domain.rates import format_percent, format_rate  # noqa: E402
from integration.bcb_adapter import BCBSeriesAdapter  # noqa: E402
from integration.series_catalog import SeriesCatalog  # noqa: E402
from interface.api import api_bp  # noqa: E402
from interface.web import web_bp  # noqa: E402


def create_app(config: Optional[Mapping[str, Any]] = None,
               http_session: Optional[requests.Session] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    configure_logging(app)

    catalog = SeriesCatalog.from_json(app.config["SERIES_CATALOG_PATH"])
    sgs = BCBSeriesAdapter(
        session=http_session,
        base_url=app.config["BCB_SGS_BASE"],
        timeout=app.config["BCB_TIMEOUT"],
    )
    app.extensions["series_catalog"] = catalog
    app.extensions["lookup_tokens"] = TokenRegistry()
    app.extensions["rate_comparison"] = RateComparisonService(sgs=sgs, catalog=catalog)
    app.extensions["margin_preferences"] = MarginPreferenceStore(
        path=app.config["PREFERENCES_PATH"],
        default=app.config["DEFAULT_MARGIN_PERCENT"],
    )

    app.add_template_filter(format_rate, "taxa")
    app.add_template_filter(format_percent, "percentual")

    # registro dos blueprints
    app.register_blueprint(web_bp)
    app.register_blueprint(api_bp)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
