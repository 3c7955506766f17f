# tools/build_series_catalog.py  (uso: python -m tools.build_series_catalog planilha.xlsx)
"""
Gera o catálogo estático de séries do SGS (código -> descrição)
a partir de uma exportação em planilha (.xlsx) ou CSV.

Entrada:
    - planilha/CSV com colunas de código e descrição
      (aceita "Código"/"codigo"/"code" e "Descrição"/"descricao"/"nome")

Saída:
    - data/series_catalog.json
      Estrutura:
      [
        {"codigo": 20714, "descricao": "Taxa média de juros das operações de crédito - Total"},
        ...
      ]
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Dict, List

import pandas as pd

from integration.series_catalog import normalize_text

DEFAULT_OUTPUT = Path("data/series_catalog.json")

CODE_COLUMNS = ("codigo", "code", "cod", "serie")
DESCRIPTION_COLUMNS = ("descricao", "description", "nome", "name")


def _pick_column(df: pd.DataFrame, candidates) -> str:
    by_normalized = {normalize_text(str(c)).strip(): c for c in df.columns}
    for cand in candidates:
        if cand in by_normalized:
            return by_normalized[cand]
    raise ValueError(
        f"Faltam colunas na planilha: esperado uma de {list(candidates)}. "
        f"Colunas disponíveis: {list(df.columns)}"
    )


def read_source(path: Path) -> pd.DataFrame:
    if path.suffix.lower() in (".xlsx", ".xls"):
        return pd.read_excel(path)
    # exportações do SGS costumam vir com ';'
    return pd.read_csv(path, sep=None, engine="python", encoding="utf-8")


def build_catalog(df: pd.DataFrame) -> List[Dict]:
    """Normaliza, remove inválidos/duplicados e ordena por código."""
    code_col = _pick_column(df, CODE_COLUMNS)
    desc_col = _pick_column(df, DESCRIPTION_COLUMNS)

    out = pd.DataFrame({
        "codigo": pd.to_numeric(df[code_col], errors="coerce"),
        "descricao": df[desc_col].astype("string").str.strip(),
    })
    out = out.dropna(subset=["codigo", "descricao"])
    out = out[(out["codigo"] >= 1) & (out["codigo"] % 1 == 0) & (out["descricao"] != "")]
    out = out.assign(codigo=out["codigo"].astype(int))
    out = out.drop_duplicates(subset="codigo", keep="first").sort_values("codigo")

    return [
        {"codigo": int(row.codigo), "descricao": str(row.descricao)}
        for row in out.itertuples(index=False)
    ]


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Gera data/series_catalog.json a partir de uma planilha do SGS.")
    parser.add_argument("source", type=Path, help="arquivo .xlsx ou .csv")
    parser.add_argument("-o", "--output", type=Path, default=DEFAULT_OUTPUT)
    args = parser.parse_args(argv)

    print(f"[INFO] Lendo: {args.source}")
    if not args.source.exists():
        raise FileNotFoundError(f"Arquivo de entrada {args.source} não existe – corrija o caminho.")

    catalog = build_catalog(read_source(args.source))
    print(f"[INFO] Séries válidas: {len(catalog)}")

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with args.output.open("w", encoding="utf-8") as f:
        json.dump(catalog, f, indent=2, ensure_ascii=False)

    print(f"[INFO] Catálogo salvo em: {args.output.resolve()}")


if __name__ == "__main__":
    main()
