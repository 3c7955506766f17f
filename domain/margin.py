from __future__ import annotations

from decimal import Decimal
from typing import Union

from domain.models import ComparisonResult

Number = Union[int, float, Decimal]

_HUNDRED = Decimal(100)


def _dec(value: Number) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def ceiling_for(base_rate: Number, margin_percent: Number) -> Decimal:
    return _dec(base_rate) * (1 + _dec(margin_percent) / _HUNDRED)


def evaluate(base_rate: Number, charged_rate: Number, margin_percent: Number) -> ComparisonResult:
    """
    Compara a taxa cobrada com o teto permitido:
      teto    = base * (1 + margem / 100)
      excede  = cobrada > teto   (igualdade NÃO excede)
      excesso = (cobrada - teto) / teto * 100, só quando excede

    Teto 0 com cobrada > 0 excede, mas o excesso fica None (ilimitado).
    Cálculo em Decimal para que os casos de fronteira sejam exatos.
    """
    base = _dec(base_rate)
    charged = _dec(charged_rate)
    margin = _dec(margin_percent)

    ceiling = ceiling_for(base, margin)
    exceeds = charged > ceiling

    excess = None
    if exceeds and ceiling > 0:
        excess = float((charged - ceiling) / ceiling * _HUNDRED)

    return ComparisonResult(
        base_rate=float(base),
        charged_rate=float(charged),
        margin_percent=float(margin),
        ceiling=float(ceiling),
        exceeds=exceeds,
        excess_percent=excess,
    )
