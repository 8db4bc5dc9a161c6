import sqlite3
from datetime import date

import pytest

from fazenda.domain.models import MilkProduction
from fazenda.infra.repositories import AnimalRepo, AnimalTypeRepo, MilkProductionRepo


HOJE = date(2024, 6, 10)


def _seed_animals(db):
    cow = AnimalTypeRepo(db).create({"name": "Cow"})
    animals = AnimalRepo(db)
    a = animals.create({"name": "Bessie", "type_id": cow["id"], "description": "x"})
    b = animals.create({"name": "Mimosa", "type_id": cow["id"], "description": "y"})
    return a, b


def _seed_production(db):
    a, b = _seed_animals(db)
    repo = MilkProductionRepo(db)
    repo.create(MilkProduction(a["id"], "2024-06-09", 6.0, 4.0))
    repo.create(MilkProduction(a["id"], "2024-06-03", 5.0))     # exatamente no corte de 7 dias
    repo.create(MilkProduction(a["id"], "2024-05-01", 12.0, 8.0))
    repo.create(MilkProduction(b["id"], "2024-06-08", 4.0, 3.0))
    return repo, a, b


def test_total_is_stored_on_create_and_update(db):
    a, _ = _seed_animals(db)
    repo = MilkProductionRepo(db)
    rec = repo.create({"animal_id": a["id"], "date": "2024-06-01", "morning_amount": 10.5, "evening_amount": 8})
    assert rec["total_amount"] == 18.5

    rec = repo.update(rec["id"], {"evening_amount": 9})
    assert rec["morning_amount"] == 10.5
    assert rec["total_amount"] == 19.5

    same = repo.update(rec["id"], {})
    assert same["total_amount"] == 19.5

    cleared = repo.update(rec["id"], {"morning_amount": None})
    assert cleared["morning_amount"] == 0
    assert cleared["total_amount"] == 9


def test_missing_amount_counts_as_zero(db):
    a, _ = _seed_animals(db)
    rec = MilkProductionRepo(db).create({"animal_id": a["id"], "date": "2024-06-01", "morning_amount": 7})
    assert rec["evening_amount"] == 0
    assert rec["total_amount"] == 7


def test_stats_for_all_and_for_one_animal(db):
    repo, a, _ = _seed_production(db)

    stats = repo.get_production_stats(today=HOJE)
    assert stats == {
        "totalRecords": 4,
        "totalProduction": 42.0,
        "averageDaily": 10.5,
        "lastWeekProduction": 22.0,
    }

    only_a = repo.get_production_stats(animal_id=a["id"], today=HOJE)
    assert only_a["totalRecords"] == 3
    assert only_a["totalProduction"] == 35.0
    assert only_a["averageDaily"] == pytest.approx(35.0 / 3)
    assert only_a["lastWeekProduction"] == 15.0


def test_stats_without_records(db):
    assert MilkProductionRepo(db).get_production_stats(today=HOJE) == {
        "totalRecords": 0,
        "totalProduction": 0.0,
        "averageDaily": 0.0,
        "lastWeekProduction": 0.0,
    }


def test_chart_data_groups_by_day(db):
    repo, a, _ = _seed_production(db)

    chart = repo.get_chart_data(days=7, today=HOJE)
    assert chart == [
        {"date": "2024-06-03", "total": 5.0, "morning": 5.0, "evening": 0.0},
        {"date": "2024-06-08", "total": 7.0, "morning": 4.0, "evening": 3.0},
        {"date": "2024-06-09", "total": 10.0, "morning": 6.0, "evening": 4.0},
    ]
    assert [r["date"] for r in repo.get_chart_data(animal_id=a["id"], days=7, today=HOJE)] == [
        "2024-06-03", "2024-06-09",
    ]
    # janela padrão de 30 dias ainda exclui maio/01
    assert len(repo.get_chart_data(today=HOJE)) == 3


def test_listings(db):
    repo, a, b = _seed_production(db)

    assert [r["date"] for r in repo.get_all()] == ["2024-06-09", "2024-06-08", "2024-06-03", "2024-05-01"]
    assert [r["date"] for r in repo.get_by_animal(b["id"])] == ["2024-06-08"]

    ranged = repo.get_by_date_range("2024-06-03", "2024-06-08")
    assert [(r["date"], r["animal_name"]) for r in ranged] == [
        ("2024-06-08", "Mimosa"),
        ("2024-06-03", "Bessie"),
    ]


def test_records_require_animal_and_cascade(db):
    repo, a, _ = _seed_production(db)
    with pytest.raises(sqlite3.IntegrityError):
        repo.create({"animal_id": 999, "date": "2024-06-01", "morning_amount": 1})

    AnimalRepo(db).delete(a["id"])
    assert repo.get_by_animal(a["id"]) == []
    assert len(repo.get_all()) == 1


def test_update_and_delete_missing(db):
    repo = MilkProductionRepo(db)
    assert repo.update(1, {"morning_amount": 2}) is None
    repo.delete(1)
    assert repo.get_by_id(1) is None
