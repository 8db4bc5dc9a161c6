import base64
import os
from pathlib import Path

import pytest

from fazenda.adapters.commands import CommandError, CommandSurface
from fazenda.adapters.file_store import FileStore


PROCEDURES = {
    "get-app-info", "update-app-info",
    "get-animal-types", "get-animal-type", "create-animal-type", "update-animal-type",
    "delete-animal-type",
    "get-animals", "get-animal", "create-animal", "update-animal", "delete-animal",
    "get-animal-stats", "get-animal-type-counts", "export-animals-excel",
    "get-animal-documents", "add-animal-document", "remove-animal-document",
    "remove-animal-documents", "get-animal-document", "get-animal-document-details",
    "get-animal-documents-details", "update-animal-document", "delete-animal-document",
    "save-document", "get-document-path", "save-image", "get-image-path", "get-image-paths",
    "get-transactions", "get-transaction", "create-transaction", "update-transaction",
    "delete-transaction", "get-cashflow-summary", "get-transactions-by-date-range",
    "get-transactions-by-type", "get-monthly-stats", "export-transactions-excel",
    "get-health-records", "get-health-records-by-type", "get-all-health-records",
    "get-health-record", "create-health-record",
    "update-health-record", "delete-health-record", "get-upcoming-events",
    "get-milk-production", "get-milk-production-by-animal", "get-milk-production-by-date-range",
    "get-milk-production-by-id", "create-milk-production", "update-milk-production",
    "delete-milk-production", "get-milk-production-stats", "get-milk-production-chart-data",
}


def _surface(db, tmp_path: Path) -> CommandSurface:
    return CommandSurface(db, FileStore(str(tmp_path / "arquivos")))


def test_all_procedures_are_registered(db, tmp_path):
    assert set(_surface(db, tmp_path).procedures) == PROCEDURES


def test_scenario_through_procedures(db, tmp_path):
    s = _surface(db, tmp_path)
    cow = s.call("create-animal-type", "Cow")
    s.call("create-animal", {"name": "Bessie", "type_id": cow["id"], "gender": "FEMALE", "description": "dairy"})

    assert s.call("get-animal-type-counts") == [{"name": "Cow", "count": 1}]
    s.call("delete-animal-type", cow["id"])
    assert s.call("get-animals") == []


def test_update_animal_type_only_touches_given_fields(db, tmp_path):
    s = _surface(db, tmp_path)
    cow = s.call("create-animal-type", "Cow", "Bovino")

    updated = s.call("update-animal-type", cow["id"], description="Gado")
    assert updated["name"] == "Cow"
    assert updated["description"] == "Gado"

    renamed = s.call("update-animal-type", cow["id"], "Vaca")
    assert renamed["name"] == "Vaca"
    assert renamed["description"] == "Gado"


def test_constraint_failures_keep_sqlite_message(db, tmp_path):
    s = _surface(db, tmp_path)
    s.call("create-animal-type", "Cow")
    with pytest.raises(CommandError) as info:
        s.call("create-animal-type", "Cow")
    assert info.value.kind == "constraint"
    assert "UNIQUE" in info.value.message


def test_unknown_procedure(db, tmp_path):
    with pytest.raises(CommandError) as info:
        _surface(db, tmp_path).call("launch-rocket")
    assert info.value.kind == "unknown_procedure"


def test_bad_arguments(db, tmp_path):
    with pytest.raises(CommandError) as info:
        _surface(db, tmp_path).call("get-animal")
    assert info.value.kind == "bad_arguments"


def test_transactions_through_procedures(db, tmp_path):
    s = _surface(db, tmp_path)
    t = s.call("create-transaction", {"type": "income", "name": "Leite", "amount": 100, "date": "2024-01-10"})
    s.call("create-transaction", {"type": "expense", "name": "Ração", "amount": 40, "date": "2024-01-11"})

    assert s.call("get-cashflow-summary")["balance"] == 60
    assert s.call("delete-transaction", t["id"]) == t["id"]
    assert s.call("get-transaction", t["id"]) is None
    assert [m["month"] for m in s.call("get-monthly-stats", 2024)] == [1]


def test_documents_and_images_through_procedures(db, tmp_path):
    s = _surface(db, tmp_path)
    cow = s.call("create-animal-type", "Cow")
    bessie = s.call("create-animal", {"name": "Bessie", "type_id": cow["id"], "description": "x"})

    payload = base64.b64encode(b"guia").decode("ascii")
    filename = s.call("save-document", payload, "gta.pdf")
    s.call("add-animal-document", bessie["id"], filename, "gta.pdf")
    assert s.call("get-animal-documents", bessie["id"]) == [filename]
    assert s.call("get-document-path", filename).startswith("file://")

    s.call("remove-animal-document", bessie["id"], filename)
    assert s.call("get-animal", bessie["id"])["documents"] == []

    image = base64.b64encode(b"png").decode("ascii")
    rel = s.call("save-image", f"data:image/png;base64,{image}")
    assert s.call("get-image-path", rel) == f"data:image/png;base64,{image}"
    assert s.call("get-image-paths", [rel, ""]) == {rel: f"data:image/png;base64,{image}", "": ""}


def test_missing_document_is_io_error(db, tmp_path):
    with pytest.raises(CommandError) as info:
        _surface(db, tmp_path).call("get-document-path", "sumiu.pdf")
    assert info.value.kind == "io"
    assert info.value.message == "Document not found"


def test_export_procedures(db, tmp_path):
    s = _surface(db, tmp_path)
    s.call("create-transaction", {"type": "income", "name": "Leite", "amount": 10, "date": "2024-01-10"})
    path = tmp_path / "caixa.xlsx"

    res = s.call("export-transactions-excel", str(path))
    assert res["success"] is True
    assert path.exists()
    assert s.call("export-animals-excel", str(tmp_path / "rebanho.xlsx"))["success"] is True


def test_default_file_store_sits_next_to_database(db):
    s = CommandSurface(db)
    assert s.files.base_dir == Path(os.path.abspath(db.path)).parent


def test_document_records_through_procedures(db, tmp_path):
    s = _surface(db, tmp_path)
    cow = s.call("create-animal-type", "Cow")
    bessie = s.call("create-animal", {"name": "Bessie", "type_id": cow["id"], "description": "x"})
    gta = s.call("add-animal-document", bessie["id"], "gta_1.pdf", "gta.pdf")
    vacina = s.call("add-animal-document", bessie["id"], "vacina_2.pdf", "vacina.pdf")

    assert s.call("get-animal-document", gta["id"]) == gta
    assert s.call("get-animal-document-details", bessie["id"], "gta_1.pdf") == gta
    assert [d["filename"] for d in s.call("get-animal-documents-details", bessie["id"])] == [
        "gta_1.pdf", "vacina_2.pdf",
    ]

    renamed = s.call("update-animal-document", gta["id"], {"original_name": "guia.pdf"})
    assert renamed["original_name"] == "guia.pdf"

    s.call("delete-animal-document", vacina["id"])
    assert s.call("get-animal-document", vacina["id"]) is None

    s.call("remove-animal-documents", bessie["id"])
    assert s.call("get-animal-documents", bessie["id"]) == []


def test_health_records_through_procedures(db, tmp_path):
    s = _surface(db, tmp_path)
    cow = s.call("create-animal-type", "Cow")
    bessie = s.call("create-animal", {"name": "Bessie", "type_id": cow["id"], "description": "x"})
    rec = s.call("create-health-record", {"animal_id": bessie["id"], "record_type": "deworming", "date": "2024-06-10"})
    s.call("create-health-record", {"animal_id": bessie["id"], "record_type": "insemination", "date": "2024-05-01"})

    assert s.call("get-health-record", rec["id"]) == rec
    assert s.call("get-health-record", 999) is None
    assert [r["id"] for r in s.call("get-all-health-records", "deworming")] == [rec["id"]]
    assert len(s.call("get-all-health-records")) == 2
    assert len(s.call("get-health-records-by-type", bessie["id"], "insemination")) == 1
