from dataclasses import dataclass
from datetime import date
from typing import Optional

from domain.rates import format_rate


@dataclass(frozen=True)
class Series:
    code: int
    description: str


@dataclass(frozen=True)
class SeriesObservation:
    code: int
    date: date
    value: float


@dataclass(frozen=True)
class ComparisonResult:
    base_rate: float
    charged_rate: float
    margin_percent: float
    ceiling: float
    exceeds: bool
    excess_percent: Optional[float] = None

    @property
    def excess_unbounded(self) -> bool:
        # teto 0 com taxa cobrada > 0: excesso sem razão definida
        return self.exceeds and self.excess_percent is None

    @property
    def claim_well_founded(self) -> bool:
        """Resultado jurídico: taxa acima do teto => revisional procedente."""
        return self.exceeds

    @property
    def verdict_label(self) -> str:
        return "Revisional procedente" if self.exceeds else "Revisional improcedente"

    @property
    def verdict_detail(self) -> str:
        if self.exceeds:
            return f"Acima do limite de {format_rate(self.margin_percent)}%"
        return "Dentro do limite permitido"

    def to_dict(self) -> dict:
        return {
            "base_rate": self.base_rate,
            "charged_rate": self.charged_rate,
            "margin_percent": self.margin_percent,
            "ceiling": self.ceiling,
            "exceeds": self.exceeds,
            "excess_percent": self.excess_percent,
            "excess_unbounded": self.excess_unbounded,
            "claim_well_founded": self.claim_well_founded,
            "verdict": self.verdict_label,
            "detail": self.verdict_detail,
        }


@dataclass(frozen=True)
class SeriesComparison:
    series: Series
    observation: SeriesObservation
    result: ComparisonResult
