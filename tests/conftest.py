import pytest

from fazenda.infra.db import Database
from fazenda.infra.migrations import apply_migrations


@pytest.fixture
def db(tmp_path):
    """Banco novo e migrado por teste."""
    database = Database.open(str(tmp_path / "fazenda_test.sqlite"))
    apply_migrations(database)
    yield database
    database.close()
