# application/forms.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Mapping, Optional

from domain.rates import format_rate, parse_digits_to_rate
from integration.series_catalog import SeriesCatalog

MIN_RATE = 0.01
MONTH_PATTERN = re.compile(r"^(0[1-9]|1[0-2])/(\d{4})$")


@dataclass
class FormResult:
    ok: bool = True
    errors: Dict[str, str] = field(default_factory=dict)
    data: Dict[str, Any] = field(default_factory=dict)

    def add_error(self, name: str, message: str) -> None:
        self.ok = False
        self.errors.setdefault(name, message)


def _text(form: Mapping[str, Any], name: str) -> str:
    return str(form.get(name) or "").strip()


def _rate_field(form: Mapping[str, Any], name: str, message: str, result: FormResult) -> float:
    value = parse_digits_to_rate(_text(form, name))
    result.data[name] = value
    result.data[f"{name}_display"] = format_rate(value)
    if value < MIN_RATE:
        result.add_error(name, message)
    return value


def _date_field(form: Mapping[str, Any], name: str, message: str, result: FormResult) -> Optional[date]:
    raw = _text(form, name)
    try:
        value = date.fromisoformat(raw)
    except ValueError:
        result.add_error(name, message)
        return None
    result.data[name] = value
    return value


def parse_month(raw: str) -> Optional[tuple]:
    """Converte "03/2024" em (2024, 3); formato inválido -> None."""
    m = MONTH_PATTERN.match((raw or "").strip())
    if not m:
        return None
    return int(m.group(2)), int(m.group(1))


def validate_rate_form(form: Mapping[str, Any]) -> FormResult:
    """Formulário "Calcular com a Taxa": taxa base + taxa de análise."""
    result = FormResult()
    _rate_field(form, "taxa_base", "Taxa base deve ser maior que 0,01%", result)
    _rate_field(form, "taxa_analise", "Taxa de análise deve ser maior que 0,01%", result)
    return result


def validate_series_form(form: Mapping[str, Any], catalog: Optional[SeriesCatalog] = None) -> FormResult:
    """
    Formulário "Calcular com a Série".
    Período: data_inicial/data_final (AAAA-MM-DD) ou mes (MM/AAAA).
    A descrição é preenchida pelo catálogo quando o código é conhecido.
    """
    result = FormResult()

    raw_code = _text(form, "codigo")
    code = int(raw_code) if re.fullmatch(r"[0-9]+", raw_code) else 0
    result.data["codigo"] = code
    if code < 1:
        result.add_error("codigo", "Código é obrigatório")

    description = _text(form, "descricao")
    if not description and catalog is not None and code:
        known = catalog.find(code)
        if known:
            description = known.description
    result.data["descricao"] = description
    if not description:
        result.add_error("descricao", "Descrição é obrigatória")

    month_raw = _text(form, "mes")
    if month_raw:
        parsed = parse_month(month_raw)
        if parsed is None:
            result.add_error("mes", "Mês deve estar no formato MM/AAAA")
        else:
            result.data["ano"], result.data["mes"] = parsed
    else:
        start = _date_field(form, "data_inicial", "Data inicial é obrigatória", result)
        end = _date_field(form, "data_final", "Data final é obrigatória", result)
        if start and end and start > end:
            result.add_error("data_final", "Data inicial deve ser anterior ou igual à data final")

    _rate_field(form, "taxa_analise", "Taxa de análise deve ser maior que 0,01%", result)
    return result
