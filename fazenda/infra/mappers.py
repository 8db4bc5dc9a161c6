# fazenda/infra/mappers.py
"""
Conversão linha do banco (snake_case) <-> objeto de domínio (camelCase).

Só o animal tem formato de domínio próprio; as demais entidades trafegam
no formato da tabela (ver `row_to_dict`).
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from fazenda.domain.models import DEFAULT_GENDER


# (campo de domínio, coluna da tabela)
ANIMAL_FIELDS = [
    ("tagNumber", "tag_number"),
    ("name", "name"),
    ("breed", "breed"),
    ("fatherBreed", "father_breed"),
    ("motherBreed", "mother_breed"),
    ("gender", "gender"),
    ("dateOfBirth", "date_of_birth"),
    ("weight", "weight"),
    ("height", "height"),
    ("acquisitionDate", "acquisition_date"),
    ("acquisitionLocation", "acquisition_location"),
    ("exitDate", "exit_date"),
    ("exitReason", "exit_reason"),
    ("age", "age"),
    ("type_id", "type_id"),
    ("description", "description"),
    ("image", "image"),
]

ANIMAL_COLUMNS = [col for _, col in ANIMAL_FIELDS]


def row_to_dict(row: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    return {k: row[k] for k in row.keys()}


def animal_from_row(row: Mapping[str, Any], documents: Optional[List[str]] = None) -> Dict[str, Any]:
    """
    Linha de `animals` (com LEFT JOIN opcional em animal_types) -> animal.

    O sub-objeto `type` só aparece quando o join trouxe o nome do tipo.
    """
    r = row_to_dict(row)
    out: Dict[str, Any] = {"id": r["id"]}
    for field, col in ANIMAL_FIELDS:
        out[field] = r.get(col)
    out["documents"] = list(documents or [])
    out["created_at"] = r.get("created_at")
    out["updated_at"] = r.get("updated_at")
    if r.get("type_name"):
        out["type"] = {
            "id": r["type_id"],
            "name": r["type_name"],
            "description": r.get("type_description"),
        }
    return out


def animal_to_db_params(data: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Animal (parcial) -> colunas da tabela.

    partial=False: todas as colunas, ausentes viram None (gender vira UNKNOWN).
    partial=True: só os campos informados; None explícito é mantido.
    id, created_at, updated_at, type e documents nunca são emitidos.
    """
    out: Dict[str, Any] = {}
    for field, col in ANIMAL_FIELDS:
        if field in data:
            out[col] = data[field]
        elif col in data and col != field:
            # aceita também a chave snake_case
            out[col] = data[col]
        elif not partial:
            out[col] = None
    if not partial and out.get("gender") is None:
        out["gender"] = DEFAULT_GENDER
    return out
