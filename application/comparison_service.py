# application/comparison_service.py
from __future__ import annotations
import logging
from datetime import date
from typing import List, Optional

from core.errors import LookupAmbiguousError, LookupNotFoundError
from domain.margin import evaluate
from domain.models import ComparisonResult, Series, SeriesComparison, SeriesObservation
from integration.bcb_adapter import BCBSeriesAdapter
from integration.series_catalog import SeriesCatalog

logger = logging.getLogger(__name__)


class RateComparisonService:
    """
    Dois modos de cálculo:
      - taxa base digitada diretamente;
      - taxa base obtida do SGS (série + período ou mês), exigindo exatamente
        uma observação antes de avaliar.
    A margem é sempre injetada pelo chamador.
    """

    def __init__(self,
                 sgs: Optional[BCBSeriesAdapter] = None,
                 catalog: Optional[SeriesCatalog] = None) -> None:
        self._sgs = sgs or BCBSeriesAdapter()
        self._catalog = catalog or SeriesCatalog()

    def compare_with_base_rate(self, base_rate: float, charged_rate: float, margin_percent: float) -> ComparisonResult:
        return evaluate(base_rate, charged_rate, margin_percent)

    def _single_observation(self, code: int, rows: List[SeriesObservation]) -> SeriesObservation:
        if not rows:
            logger.info("No observation for series %s", code)
            raise LookupNotFoundError(code)
        if len(rows) > 1:
            logger.info("Series %s returned %d observations, expected one", code, len(rows))
            raise LookupAmbiguousError(code, count=len(rows))
        return rows[0]

    def _series(self, code: int, description: Optional[str]) -> Series:
        known = self._catalog.find(code)
        if description:
            return Series(code=code, description=description)
        return known or Series(code=code, description=str(code))

    def _compare(self, code: int, rows: List[SeriesObservation], charged_rate: float,
                 margin_percent: float, description: Optional[str]) -> SeriesComparison:
        obs = self._single_observation(code, rows)
        result = evaluate(obs.value, charged_rate, margin_percent)
        return SeriesComparison(series=self._series(code, description), observation=obs, result=result)

    def compare_with_series(self, code: int, start: date, end: date, charged_rate: float,
                            margin_percent: float, description: Optional[str] = None) -> SeriesComparison:
        rows = self._sgs.get_observations(code, start, end)
        return self._compare(code, rows, charged_rate, margin_percent, description)

    def compare_with_series_month(self, code: int, year: int, month: int, charged_rate: float,
                                  margin_percent: float, description: Optional[str] = None) -> SeriesComparison:
        rows = self._sgs.get_month_observations(code, year, month)
        return self._compare(code, rows, charged_rate, margin_percent, description)
