# application/preferences.py
from __future__ import annotations
import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional, Union

from core.config import Config
from core.errors import InputValidationError

logger = logging.getLogger(__name__)

MARGIN_KEY = "margin_percent"


class MarginPreferenceStore:
    """
    Preferência única: margem permitida (%), guardada como string num JSON.
    Ausente/ilegível -> padrão "30", sem erro. Só grava no save explícito.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, default: Optional[str] = None) -> None:
        self.path = Path(path or Config.PREFERENCES_PATH)
        self.default = default or Config.DEFAULT_MARGIN_PERCENT

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read preferences from %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _to_number(raw: Union[str, int, float, Decimal]) -> Decimal:
        text = str(raw).strip()
        if "," in text:
            # pt-BR "1.234,50": ponto é separador de milhar
            text = text.replace(".", "").replace(",", ".")
        try:
            value = Decimal(text)
        except InvalidOperation:
            raise InputValidationError({MARGIN_KEY: "Margem deve ser um número"})
        if not value.is_finite() or value < 0:
            raise InputValidationError({MARGIN_KEY: "Margem não pode ser negativa"})
        return value

    def load_margin(self) -> float:
        raw = self._read().get(MARGIN_KEY)
        if raw is None:
            return float(self.default)
        try:
            return float(self._to_number(raw))
        except InputValidationError:
            logger.warning("Invalid stored margin %r, falling back to %s", raw, self.default)
            return float(self.default)

    def save_margin(self, value: Union[str, int, float, Decimal]) -> float:
        number = self._to_number(value)
        data = self._read()
        data[MARGIN_KEY] = format(number.normalize(), "f")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        logger.info("Margin preference saved: %s%%", data[MARGIN_KEY])
        return float(number)
