# integration/bcb_adapter.py
from __future__ import annotations
import calendar
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

import requests

from core.config import Config
from core.errors import LookupTransportError
from domain.models import SeriesObservation

logger = logging.getLogger(__name__)

SGS_DATE_FORMAT = "%d/%m/%Y"


class BCBSeriesAdapter:
    """
    BACEN SGS – séries temporais (dados públicos, sem chave):
      GET {base}/bcdata.sgs.{codigo}/dados?formato=json&dataInicial=dd/mm/aaaa&dataFinal=dd/mm/aaaa
    Resposta: lista de {"data": "dd/mm/aaaa", "valor": "5.47"}.
    - Erros de transporte e payloads de erro viram LookupTransportError,
      com a mensagem remota quando existir.
    - Linhas que não parseiam são ignoradas (com aviso no log).
    """

    def __init__(self, session: Optional[requests.Session] = None,
                 base_url: Optional[str] = None, timeout: Optional[float] = None) -> None:
        self.s = session or requests.Session()
        self.base_url = (base_url or Config.BCB_SGS_BASE).rstrip("/")
        self.timeout = timeout if timeout is not None else Config.BCB_TIMEOUT

        # debug/diag
        self.last_request: Optional[Tuple[str, Dict]] = None
        self.last_status: Optional[int] = None
        self._last_error_json: Optional[Dict[str, Any]] = None

    # ---------------- HTTP ----------------

    def _url(self, code: int) -> str:
        return f"{self.base_url}/bcdata.sgs.{int(code)}/dados"

    @staticmethod
    def _remote_message(payload: Any) -> Optional[str]:
        if isinstance(payload, dict):
            for key in ("message", "error", "erro", "mensagem"):
                v = payload.get(key)
                if isinstance(v, str) and v.strip():
                    return v.strip()
        return None

    def _get(self, code: int, params: Dict) -> Any:
        url = self._url(code)
        base = {"formato": "json"}
        base.update(params)
        self.last_request = (url, base.copy())
        try:
            r = self.s.get(url, params=base, timeout=self.timeout)
        except requests.RequestException as e:
            self.last_status = None
            self._last_error_json = {"exception": type(e).__name__, "text": str(e)[:500]}
            logger.warning("SGS request failed: %s %s (%s)", url, base, e)
            raise LookupTransportError() from e

        self.last_status = r.status_code
        if r.status_code >= 400:
            try:
                self._last_error_json = r.json()
            except ValueError:
                self._last_error_json = {"http_error": r.status_code, "text": r.text[:500]}
            message = self._remote_message(self._last_error_json)
            logger.warning("SGS returned HTTP %s for %s: %s", r.status_code, url, message)
            raise LookupTransportError(message, status_code=r.status_code)

        self._last_error_json = None
        try:
            payload = r.json()
        except ValueError as e:
            self._last_error_json = {"text": r.text[:500]}
            raise LookupTransportError() from e

        # o SGS às vezes responde 200 com um objeto de erro
        if isinstance(payload, dict):
            self._last_error_json = payload
            raise LookupTransportError(self._remote_message(payload), status_code=r.status_code)
        return payload

    # -------------- Data --------------------

    @staticmethod
    def _parse_row(code: int, row: Any) -> Optional[SeriesObservation]:
        if not isinstance(row, dict):
            return None
        raw_date = row.get("data")
        raw_value = row.get("valor")
        if raw_date is None or raw_value is None:
            return None
        try:
            day = datetime.strptime(str(raw_date).strip(), SGS_DATE_FORMAT).date()
            value = Decimal(str(raw_value).strip().replace(",", "."))
        except (ValueError, InvalidOperation):
            return None
        return SeriesObservation(code=int(code), date=day, value=float(value))

    def get_observations(self, code: int, start: date, end: date) -> List[SeriesObservation]:
        params = {
            "dataInicial": start.strftime(SGS_DATE_FORMAT),
            "dataFinal": end.strftime(SGS_DATE_FORMAT),
        }
        rows = self._get(code, params)

        items: List[SeriesObservation] = []
        for row in rows or []:
            obs = self._parse_row(code, row)
            if obs is None:
                logger.warning("Skipping unparsable SGS row for series %s: %r", code, row)
                continue
            items.append(obs)
        logger.info("SGS series %s %s..%s -> %d observation(s)", code, params["dataInicial"], params["dataFinal"], len(items))
        return items

    def get_month_observations(self, code: int, year: int, month: int) -> List[SeriesObservation]:
        """Consulta de um único mês: do dia 1 ao último dia do mês."""
        last_day = calendar.monthrange(year, month)[1]
        return self.get_observations(code, date(year, month, 1), date(year, month, last_day))

    # --- debug/diag ---

    def get_last_request_info(self) -> Optional[Tuple[str, Dict, Optional[int]]]:
        if self.last_request is None:
            return None
        url, params = self.last_request
        return (url, params, self.last_status)

    def get_last_error_json(self) -> Optional[Dict[str, Any]]:
        return self._last_error_json
