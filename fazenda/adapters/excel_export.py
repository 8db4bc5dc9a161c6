# fazenda/adapters/excel_export.py
"""
Exportação para planilha XLSX (pandas + openpyxl).

Cada exportação gera duas abas: os dados e um resumo (Metric/Value).
As funções só consomem o resultado dos repositórios; não tocam no banco.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from fazenda.infra.logger import log_file_operation, log_system_event


def _write_workbook(path: str, sheets: Dict[str, pd.DataFrame]) -> Dict[str, Any]:
    try:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for name, df in sheets.items():
                df.to_excel(writer, sheet_name=name, index=False)
    except (OSError, ValueError) as exc:
        log_system_event("excel_export_error", {"path": path, "error": str(exc)}, level="error")
        return {"success": False, "message": "Failed to export"}
    log_file_operation("export", path, sheets=list(sheets))
    return {"success": True, "filePath": path}


def _summary_frame(items: List[tuple]) -> pd.DataFrame:
    return pd.DataFrame([{"Metric": k, "Value": v} for k, v in items], columns=["Metric", "Value"])


TRANSACTION_COLUMNS = ["ID", "Type", "Description", "Amount", "Date", "CreatedAt", "UpdatedAt"]


def export_transactions(transactions: List[Dict[str, Any]], summary: Dict[str, Any], path: str) -> Dict[str, Any]:
    """Abas `Transactions` e `Summary`."""
    rows = [
        {
            "ID": t["id"],
            "Type": (t.get("type") or "").capitalize(),
            "Description": t.get("name"),
            "Amount": t.get("amount"),
            "Date": t.get("date"),
            "CreatedAt": t.get("created_at"),
            "UpdatedAt": t.get("updated_at"),
        }
        for t in transactions
    ]
    resumo = _summary_frame([
        ("Total Income", summary.get("totalIncome", 0)),
        ("Total Expense", summary.get("totalExpense", 0)),
        ("Balance", summary.get("balance", 0)),
        ("Transaction Count", summary.get("transactionCount", 0)),
    ])
    return _write_workbook(path, {
        "Transactions": pd.DataFrame(rows, columns=TRANSACTION_COLUMNS),
        "Summary": resumo,
    })


ANIMAL_COLUMNS = [
    "ID", "Tag Number", "Name", "Type", "Breed", "Gender", "Date of Birth",
    "Weight", "Height", "Age", "Acquisition Date", "Acquisition Location",
    "Exit Date", "Exit Reason", "Description",
]


def export_animals(animals: List[Dict[str, Any]], stats: Dict[str, Any], path: str) -> Dict[str, Any]:
    """Abas `Animals` e `Summary` (a partir de AnimalRepo.get_stats)."""
    rows = [
        {
            "ID": a["id"],
            "Tag Number": a.get("tagNumber"),
            "Name": a.get("name"),
            "Type": (a.get("type") or {}).get("name"),
            "Breed": a.get("breed"),
            "Gender": a.get("gender"),
            "Date of Birth": a.get("dateOfBirth"),
            "Weight": a.get("weight"),
            "Height": a.get("height"),
            "Age": a.get("age"),
            "Acquisition Date": a.get("acquisitionDate"),
            "Acquisition Location": a.get("acquisitionLocation"),
            "Exit Date": a.get("exitDate"),
            "Exit Reason": a.get("exitReason"),
            "Description": a.get("description"),
        }
        for a in animals
    ]
    resumo = _summary_frame([
        ("Total Animals", stats.get("totalAnimals", 0)),
        ("Total Types", stats.get("totalTypes", 0)),
        ("Most Common Type", stats.get("mostCommonType", "None")),
        ("Most Common Type Count", stats.get("mostCommonTypeCount", 0)),
    ])
    return _write_workbook(path, {
        "Animals": pd.DataFrame(rows, columns=ANIMAL_COLUMNS),
        "Summary": resumo,
    })
