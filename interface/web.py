# interface/web.py
import logging

from flask import Blueprint, current_app, flash, redirect, render_template, request, session, url_for

from application.forms import validate_rate_form, validate_series_form
from application.lookup_tracker import LookupTracker
from core.errors import InputValidationError, SeriesLookupError

logger = logging.getLogger(__name__)

web_bp = Blueprint("web", __name__)


def _service():
    return current_app.extensions["rate_comparison"]


def _preferences():
    return current_app.extensions["margin_preferences"]


def _tracker(prefix: str) -> LookupTracker:
    return LookupTracker(session, prefix, current_app.extensions["lookup_tokens"])


def _render(tab: str = "serie", **ctx):
    ctx.setdefault("serie_form", {})
    ctx.setdefault("juros_form", {})
    ctx.setdefault("errors", {})
    return render_template(
        "index.html",
        tab=tab,
        margin=_preferences().load_margin(),
        serie_result=_tracker("serie").result,
        juros_result=_tracker("juros").result,
        **ctx,
    )


@web_bp.route("/")
def index():
    return _render(tab=request.args.get("tab", "serie"))


@web_bp.route("/serie", methods=["POST"])
def calcular_serie():
    checked = validate_series_form(request.form, current_app.extensions["series_catalog"])
    if not checked.ok:
        return _render(tab="serie", serie_form=checked.data, errors=checked.errors), 400

    data = checked.data
    margin = _preferences().load_margin()
    tracker = _tracker("serie")
    token = tracker.begin()
    try:
        if "mes" in data:
            comparison = _service().compare_with_series_month(
                data["codigo"], data["ano"], data["mes"], data["taxa_analise"], margin, data["descricao"],
            )
        else:
            comparison = _service().compare_with_series(
                data["codigo"], data["data_inicial"], data["data_final"], data["taxa_analise"], margin, data["descricao"],
            )
    except SeriesLookupError as e:
        tracker.clear()
        logger.info("Series lookup failed: %s", e)
        flash(e.message, "danger")
        return _render(tab="serie", serie_form=data)

    payload = comparison.result.to_dict()
    payload.update({
        "label_base": "Taxa BACEN",
        "series_code": comparison.series.code,
        "series_description": comparison.series.description,
        "observation_date": comparison.observation.date.isoformat(),
    })
    tracker.complete(token, payload)
    return _render(tab="serie", serie_form=data)


@web_bp.route("/juros", methods=["POST"])
def calcular_juros():
    checked = validate_rate_form(request.form)
    if not checked.ok:
        return _render(tab="juros", juros_form=checked.data, errors=checked.errors), 400

    data = checked.data
    result = _service().compare_with_base_rate(data["taxa_base"], data["taxa_analise"], _preferences().load_margin())
    payload = result.to_dict()
    payload["label_base"] = "Taxa Base"

    tracker = _tracker("juros")
    tracker.complete(tracker.begin(), payload)
    return _render(tab="juros", juros_form=data)


@web_bp.route("/limpar", methods=["POST"])
def limpar():
    tab = request.form.get("form", "juros")
    if tab not in ("serie", "juros"):
        tab = "juros"
    _tracker(tab).clear()
    return redirect(url_for("web.index", tab=tab))


@web_bp.route("/margem", methods=["POST"])
def salvar_margem():
    try:
        saved = _preferences().save_margin(request.form.get("margem", ""))
    except InputValidationError as e:
        flash(next(iter(e.errors.values())), "danger")
    else:
        flash(f"Margem salva: {saved:g}%", "success")
    return redirect(url_for("web.index", tab=request.form.get("tab", "serie")))
