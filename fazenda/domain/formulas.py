"""
Fórmulas de agregação da fazenda.

Funções puras usadas pelos repositórios depois das consultas SQL:
total de ordenha, saldo de caixa e janelas de datas.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional


def _num(x: Optional[float]) -> float:
    return float(x) if x is not None else 0.0


def total_ordenha(morning: Optional[float], evening: Optional[float]) -> float:
    """Total do dia = manhã + tarde (valores ausentes contam como zero)."""
    return _num(morning) + _num(evening)


def saldo(income: Optional[float], expense: Optional[float]) -> float:
    """Saldo = Σ receitas − Σ despesas."""
    return _num(income) - _num(expense)


def com_saldo_mensal(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Acrescenta `balance` a cada linha mensal {month, income, expense}."""
    out: List[Dict[str, Any]] = []
    for r in rows:
        income = _num(r.get("income"))
        expense = _num(r.get("expense"))
        out.append(
            {
                "month": int(r["month"]),
                "income": income,
                "expense": expense,
                "balance": saldo(income, expense),
            }
        )
    return out


def data_corte(dias: int, hoje: Optional[date] = None) -> str:
    """
    Data ISO (YYYY-MM-DD) de `dias` atrás.

    Ex.: data_corte(7, date(2024, 1, 10)) -> "2024-01-03"
    """
    hoje = hoje or date.today()
    return (hoje - timedelta(days=dias)).isoformat()


def hoje_iso(hoje: Optional[date] = None) -> str:
    return (hoje or date.today()).isoformat()
