from datetime import date
from math import isclose

from fazenda.domain.formulas import com_saldo_mensal, data_corte, hoje_iso, saldo, total_ordenha


def test_total_ordenha_trata_ausente_como_zero():
    assert total_ordenha(10.5, 8) == 18.5
    assert total_ordenha(None, 3) == 3.0
    assert total_ordenha(None, None) == 0.0


def test_saldo():
    assert saldo(100, 40) == 60
    assert saldo(None, 25.5) == -25.5
    assert isclose(saldo(0.3, 0.1), 0.2, rel_tol=1e-9)


def test_com_saldo_mensal():
    rows = [{"month": "01", "income": 100, "expense": None}, {"month": 2, "income": 0, "expense": 40}]
    assert com_saldo_mensal(rows) == [
        {"month": 1, "income": 100.0, "expense": 0.0, "balance": 100.0},
        {"month": 2, "income": 0.0, "expense": 40.0, "balance": -40.0},
    ]


def test_datas_de_corte():
    assert data_corte(7, date(2024, 1, 10)) == "2024-01-03"
    # atravessa o ano
    assert data_corte(30, date(2024, 1, 10)) == "2023-12-11"
    assert hoje_iso(date(2024, 2, 29)) == "2024-02-29"
