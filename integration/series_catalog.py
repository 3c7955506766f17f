# integration/series_catalog.py
from __future__ import annotations
import json
import logging
import unicodedata
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from domain.models import Series

logger = logging.getLogger(__name__)


def normalize_text(text: str) -> str:
    """Minúsculas e sem acentos (NFD, remove as marcas combinantes)."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


class SeriesCatalog:
    """Catálogo estático código -> descrição, só leitura."""

    def __init__(self, series: Iterable[Series] = ()) -> None:
        self._by_code: Dict[int, Series] = {}
        for s in series:
            self._by_code.setdefault(s.code, s)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "SeriesCatalog":
        p = Path(path)
        if not p.exists():
            logger.warning("Series catalog not found at %s, using empty catalog", p)
            return cls()
        with p.open("r", encoding="utf-8") as f:
            rows = json.load(f)
        series = []
        for rec in rows:
            code = rec.get("codigo", rec.get("code"))
            desc = rec.get("descricao", rec.get("description"))
            if code is None or not desc:
                continue
            series.append(Series(code=int(code), description=str(desc)))
        logger.info("Loaded %d series from %s", len(series), p)
        return cls(series)

    def __len__(self) -> int:
        return len(self._by_code)

    def all(self) -> List[Series]:
        return list(self._by_code.values())

    def find(self, code: int) -> Optional[Series]:
        return self._by_code.get(int(code))

    def search(self, query: str, limit: Optional[int] = None) -> List[Series]:
        needle = normalize_text((query or "").strip())
        hits = [
            s for s in self._by_code.values()
            if needle in normalize_text(f"{s.code} {s.description}")
        ]
        return hits[:limit] if limit is not None else hits
