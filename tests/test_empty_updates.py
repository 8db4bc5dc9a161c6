import pytest

from fazenda.infra.repositories import (
    AnimalRepo,
    AnimalTypeRepo,
    AppInfoRepo,
    DocumentRepo,
    HealthRecordRepo,
    MilkProductionRepo,
    TransactionRepo,
)


def _animal(db):
    cow = AnimalTypeRepo(db).create({"name": "Cow", "description": "Bovino"})
    return AnimalRepo(db).create(
        {"name": "Bessie", "type_id": cow["id"], "breed": "Jersey", "weight": 400.0, "description": "x"}
    )


def _type(db):
    return AnimalTypeRepo(db), AnimalTypeRepo(db).create({"name": "Goat", "description": "Caprino"})


def _transaction(db):
    repo = TransactionRepo(db)
    return repo, repo.create({"type": "expense", "name": "Ração", "amount": 40.5, "date": "2024-01-11"})


def _health_record(db):
    repo = HealthRecordRepo(db)
    rec = repo.create({
        "animal_id": _animal(db)["id"],
        "record_type": "insemination",
        "date": "2024-03-01",
        "expected_delivery_date": "2024-12-01",
        "notes": "1a dose",
    })
    return repo, rec


def _milk(db):
    repo = MilkProductionRepo(db)
    rec = repo.create({"animal_id": _animal(db)["id"], "date": "2024-06-01", "morning_amount": 6, "evening_amount": 4})
    return repo, rec


def _animal_entity(db):
    return AnimalRepo(db), _animal(db)


def _document(db):
    repo = DocumentRepo(db)
    doc = repo.add(_animal(db)["id"], "gta_1.pdf", "gta.pdf", "documents/gta_1.pdf", 120, "application/pdf")
    return repo, doc


# (construtor, tem updated_at)
ENTITIES = {
    "animal_type": (_type, True),
    "animal": (_animal_entity, True),
    "transaction": (_transaction, True),
    "health_record": (_health_record, True),
    "milk_production": (_milk, True),
    "document": (_document, False),
}


def _without_updated_at(row):
    return {k: v for k, v in row.items() if k != "updated_at"}


@pytest.mark.parametrize("entity", sorted(ENTITIES))
def test_empty_update_keeps_every_field(db, entity):
    build, has_updated_at = ENTITIES[entity]
    repo, before = build(db)

    after = repo.update(before["id"], {})

    if has_updated_at:
        assert _without_updated_at(after) == _without_updated_at(before)
        assert after["updated_at"] >= before["updated_at"]
    else:
        assert after == before
    assert repo.get_by_id(before["id"]) == after


def test_empty_update_keeps_app_info(db):
    repo = AppInfoRepo(db)
    before = repo.get()
    assert repo.update({}) == before
    assert repo.get() == before
