# interface/api.py
import math
from datetime import date

from flask import Blueprint, current_app, jsonify, request

from application.forms import parse_month
from core.errors import (
    InputValidationError,
    LookupAmbiguousError,
    LookupNotFoundError,
    SeriesLookupError,
)
from domain.rates import normalize_keystrokes

api_bp = Blueprint("api", __name__, url_prefix="/api")

LOOKUP_STATUS = {
    LookupNotFoundError: 404,
    LookupAmbiguousError: 409,
}


def _series_dict(series):
    return {"code": series.code, "description": series.description}


def _rate(payload, key, required=True):
    """Taxa numérica do JSON; ausente/negativa/não numérica -> erro de validação."""
    raw = payload.get(key)
    if raw is None:
        if required:
            raise InputValidationError({key: "Campo obrigatório"})
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InputValidationError({key: "Deve ser um número"})
    if not math.isfinite(value) or value < 0:
        raise InputValidationError({key: "Não pode ser negativa"})
    return value


def _margin(payload):
    value = _rate(payload, "margin_percent", required=False)
    if value is None:
        return current_app.extensions["margin_preferences"].load_margin()
    return value


@api_bp.errorhandler(InputValidationError)
def handle_validation(e):
    return jsonify({"error": e.message, "fields": e.errors}), 400


@api_bp.errorhandler(SeriesLookupError)
def handle_lookup(e):
    status = LOOKUP_STATUS.get(type(e), 502)
    return jsonify({"error": e.message, "details": e.details}), status


@api_bp.route("/series")
def search_series():
    """
    Busca no catálogo (ignora maiúsculas e acentos).

    Parâmetros:
      ?q=veiculos  &limit=20
    """
    catalog = current_app.extensions["series_catalog"]
    try:
        limit = int(request.args.get("limit", current_app.config["SERIES_SEARCH_LIMIT"]))
    except ValueError:
        limit = current_app.config["SERIES_SEARCH_LIMIT"]
    hits = catalog.search(request.args.get("q", ""), limit=limit)
    return jsonify({"series": [_series_dict(s) for s in hits]})


@api_bp.route("/series/<int:code>")
def get_series(code):
    series = current_app.extensions["series_catalog"].find(code)
    if series is None:
        return jsonify({"error": f"Série {code} não encontrada no catálogo"}), 404
    return jsonify(_series_dict(series))


@api_bp.route("/rates/format")
def format_keystrokes():
    """Ex.: ?raw=547 -> {"value": 5.47, "display": "5,47"}"""
    value, display = normalize_keystrokes(request.args.get("raw", ""))
    return jsonify({"value": value, "display": display})


@api_bp.route("/compare", methods=["POST"])
def compare():
    """
    Body JSON:
      - base_rate [obrigatório]
      - charged_rate [obrigatório]
      - margin_percent (opc.; padrão = preferência salva)
    """
    payload = request.get_json(silent=True) or {}
    base = _rate(payload, "base_rate")
    charged = _rate(payload, "charged_rate")
    result = current_app.extensions["rate_comparison"].compare_with_base_rate(base, charged, _margin(payload))
    return jsonify(result.to_dict())


@api_bp.route("/compare/series", methods=["POST"])
def compare_series():
    """
    Body JSON:
      - code [obrigatório]
      - start + end (AAAA-MM-DD) ou month (MM/AAAA)
      - charged_rate [obrigatório]
      - margin_percent (opc.)
    """
    payload = request.get_json(silent=True) or {}
    try:
        code = int(payload.get("code"))
    except (TypeError, ValueError):
        raise InputValidationError({"code": "Código é obrigatório"})
    if code < 1:
        raise InputValidationError({"code": "Código é obrigatório"})
    charged = _rate(payload, "charged_rate")
    margin = _margin(payload)
    service = current_app.extensions["rate_comparison"]

    if payload.get("month"):
        parsed = parse_month(str(payload["month"]))
        if parsed is None:
            raise InputValidationError({"month": "Mês deve estar no formato MM/AAAA"})
        comparison = service.compare_with_series_month(code, parsed[0], parsed[1], charged, margin)
    else:
        try:
            start = date.fromisoformat(str(payload.get("start")))
            end = date.fromisoformat(str(payload.get("end")))
        except ValueError:
            raise InputValidationError({"start": "Informe start/end (AAAA-MM-DD) ou month (MM/AAAA)"})
        if start > end:
            raise InputValidationError({"end": "Data inicial deve ser anterior ou igual à data final"})
        comparison = service.compare_with_series(code, start, end, charged, margin)

    return jsonify({
        "series": _series_dict(comparison.series),
        "observation": {"date": comparison.observation.date.isoformat(), "value": comparison.observation.value},
        "result": comparison.result.to_dict(),
    })


@api_bp.route("/preferences/margin", methods=["GET", "PUT"])
def margin_preference():
    store = current_app.extensions["margin_preferences"]
    if request.method == "PUT":
        payload = request.get_json(silent=True) or {}
        if "margin_percent" not in payload:
            raise InputValidationError({"margin_percent": "Campo obrigatório"})
        saved = store.save_margin(payload["margin_percent"])
        return jsonify({"margin_percent": saved})
    return jsonify({"margin_percent": store.load_margin()})
