import logging

from fazenda.infra import logger as flog
from fazenda.adapters.commands import CommandError, CommandSurface
from fazenda.infra.db import Database
from fazenda.infra.migrations import SCHEMA_VERSION, apply_migrations


def _silence_files(monkeypatch):
    # mantém a propagação para o caplog, sem gravar em fazenda/logs/
    for lg in (flog.operation_logger, flog.database_logger, flog.system_logger, flog.file_logger):
        monkeypatch.setattr(lg, "handlers", [])


def test_logging_disabled_by_default(db, caplog):
    caplog.set_level(logging.INFO, logger="fazenda")
    CommandSurface(db).call("get-cashflow-summary")
    assert [r for r in caplog.records if r.name.startswith("fazenda")] == []
    assert flog.get_log_summary() is None


def test_procedure_calls_are_logged_when_enabled(db, caplog, monkeypatch):
    _silence_files(monkeypatch)
    monkeypatch.setattr(flog, "ENABLE_LOGGING", True)
    caplog.set_level(logging.INFO, logger="fazenda")
    surface = CommandSurface(db)

    surface.call("create-transaction", {"type": "income", "name": "Leite", "amount": 10, "date": "2024-01-10"})
    try:
        surface.call("create-transaction", {"type": "income", "name": "Zero", "amount": 0, "date": "2024-01-10"})
    except CommandError:
        pass

    messages = [r.getMessage() for r in caplog.records]
    assert any("PROCEDURE_SUCCESS: create-transaction" in m for m in messages)
    assert any("PROCEDURE_FAILED: create-transaction" in m for m in messages)
    assert any(m.startswith("DB_CREATE") for m in messages)
    assert any(r.levelno == logging.ERROR and r.name == "fazenda.system" for r in caplog.records)


def test_set_logging_toggles_flags(monkeypatch):
    monkeypatch.setattr(flog, "ENABLE_LOGGING", False)
    monkeypatch.setattr(flog, "ENABLE_OUTPUT", False)
    flog.set_logging(True, output=True)
    assert flog.ENABLE_LOGGING and flog.ENABLE_OUTPUT
    flog.set_logging(False)
    assert not flog.ENABLE_LOGGING
    assert flog.ENABLE_OUTPUT


def test_migration_progress_is_printed_only_with_output(tmp_path, capsys, monkeypatch):
    _silence_files(monkeypatch)
    monkeypatch.setattr(flog, "ENABLE_OUTPUT", False)
    with Database.open(str(tmp_path / "quieto.sqlite")) as db:
        apply_migrations(db)
    assert capsys.readouterr().out == ""

    monkeypatch.setattr(flog, "ENABLE_OUTPUT", True)
    with Database.open(str(tmp_path / "verboso.sqlite")) as db:
        apply_migrations(db)
    out = capsys.readouterr().out
    assert ">> Migração v1 aplicada." in out
    assert f">> Migração v{SCHEMA_VERSION} aplicada." in out
