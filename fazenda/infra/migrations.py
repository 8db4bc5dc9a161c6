# fazenda/infra/migrations.py
"""
Migrações de schema usando PRAGMA user_version.

V1: tabelas base (formato atual)
V2: colunas father_breed / mother_breed em animals
V3: coluna image em animals
V4: reconstrói animals quando age ainda é NOT NULL ou type_id sem ON DELETE CASCADE
V5: índices de consulta
V6: reconstrói milk_production quando total_amount ainda é coluna GENERATED

Bancos antigos (sem versão, user_version = 0) já têm as tabelas; por isso
V2–V6 sempre inspecionam a tabela viva antes de alterar qualquer coisa.
"""

from __future__ import annotations

import sqlite3
from typing import List

from fazenda.config import DEFAULTS
from .db import Database
from .logger import log_database_operation, log_system_event, print_system, system_logger


SCHEMA_VERSION = 6


class MigrationError(RuntimeError):
    """Falha ao migrar o schema; a aplicação não deve subir."""


ANIMALS_DDL = """
    CREATE TABLE IF NOT EXISTS {table} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        tag_number TEXT,
        name TEXT NOT NULL,
        breed TEXT,
        father_breed TEXT,
        mother_breed TEXT,
        gender TEXT NOT NULL DEFAULT 'UNKNOWN'
            CHECK(gender IN ('MALE', 'FEMALE', 'CASTRATED', 'UNKNOWN')),
        date_of_birth TEXT,
        weight REAL,
        height REAL,
        acquisition_date TEXT,
        acquisition_location TEXT,
        exit_date TEXT,
        exit_reason TEXT,
        age INTEGER,
        type_id INTEGER NOT NULL,
        description TEXT NOT NULL,
        image TEXT,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (type_id) REFERENCES animal_types(id) ON DELETE CASCADE
    );
"""

MILK_PRODUCTION_DDL = """
    CREATE TABLE IF NOT EXISTS {table} (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        animal_id INTEGER NOT NULL,
        date TEXT NOT NULL,
        morning_amount REAL DEFAULT 0,
        evening_amount REAL DEFAULT 0,
        total_amount REAL DEFAULT 0,
        notes TEXT,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (animal_id) REFERENCES animals(id) ON DELETE CASCADE
    );
"""

SCHEMA_V1: List[str] = [
    # Metadados da aplicação (linha única, sempre a mais recente)
    """
    CREATE TABLE IF NOT EXISTS app_info (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        version TEXT NOT NULL,
        description TEXT
    );
    """,
    # Tipos de animal
    """
    CREATE TABLE IF NOT EXISTS animal_types (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        description TEXT,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
    );
    """,
    # Animais
    ANIMALS_DDL.format(table="animals"),
    # Documentos anexados
    """
    CREATE TABLE IF NOT EXISTS animal_documents (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        animal_id INTEGER NOT NULL,
        filename TEXT NOT NULL,
        original_name TEXT NOT NULL,
        file_path TEXT,
        file_size INTEGER,
        mime_type TEXT,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (animal_id) REFERENCES animals(id) ON DELETE CASCADE
    );
    """,
    # Fluxo de caixa
    """
    CREATE TABLE IF NOT EXISTS transactions (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        type TEXT NOT NULL CHECK(type IN ('income', 'expense')),
        name TEXT NOT NULL,
        amount REAL NOT NULL CHECK(amount > 0),
        date TEXT NOT NULL,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
    );
    """,
    # Inseminação e vermifugação
    """
    CREATE TABLE IF NOT EXISTS animal_health_records (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        animal_id INTEGER NOT NULL,
        record_type TEXT NOT NULL CHECK(record_type IN ('insemination', 'deworming')),
        date TEXT NOT NULL,
        expected_delivery_date TEXT,
        notes TEXT,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (animal_id) REFERENCES animals(id) ON DELETE CASCADE
    );
    """,
    # Produção de leite (total_amount gravado pelo repositório)
    MILK_PRODUCTION_DDL.format(table="milk_production"),
]

SCHEMA_V5: List[str] = [
    "CREATE INDEX IF NOT EXISTS idx_animals_type_id ON animals(type_id);",
    "CREATE INDEX IF NOT EXISTS idx_animal_documents_animal_id ON animal_documents(animal_id);",
    "CREATE INDEX IF NOT EXISTS idx_transactions_type ON transactions(type);",
    "CREATE INDEX IF NOT EXISTS idx_transactions_date ON transactions(date);",
    "CREATE INDEX IF NOT EXISTS idx_transactions_type_date ON transactions(type, date);",
    "CREATE INDEX IF NOT EXISTS idx_animal_health_records_animal_id ON animal_health_records(animal_id);",
    "CREATE INDEX IF NOT EXISTS idx_animal_health_records_type ON animal_health_records(record_type);",
    "CREATE INDEX IF NOT EXISTS idx_milk_production_animal_id ON milk_production(animal_id);",
    "CREATE INDEX IF NOT EXISTS idx_milk_production_date ON milk_production(date);",
    "CREATE INDEX IF NOT EXISTS idx_milk_production_animal_date ON milk_production(animal_id, date);",
]


def _table_columns(conn, table: str) -> List[sqlite3.Row]:
    return conn.execute(f"PRAGMA table_info({table});").fetchall()


def _ensure_column(conn, table: str, column: str, ddl: str) -> None:
    """Adiciona coluna se não existir."""
    cols = [r[1] for r in _table_columns(conn, table)]  # r[1] é o nome da coluna
    if column not in cols:
        conn.execute(f"ALTER TABLE {table} ADD COLUMN {ddl};")
        log_database_operation(table, "ADD_COLUMN", 0, column=column)


def _animals_needs_rebuild(conn) -> bool:
    """True se `age` ainda é NOT NULL ou se type_id não cascateia."""
    for r in _table_columns(conn, "animals"):
        if r[1] == "age" and r[3]:  # r[3] é o flag notnull
            return True
    for fk in conn.execute("PRAGMA foreign_key_list(animals);").fetchall():
        # (id, seq, table, from, to, on_update, on_delete, match)
        if fk[3] == "type_id" and str(fk[6]).upper() != "CASCADE":
            return True
    return False


def _milk_has_generated_total(conn) -> bool:
    """True se total_amount ainda é coluna GENERATED (bancos antigos)."""
    for r in conn.execute("PRAGMA table_xinfo(milk_production);").fetchall():
        # r[6] é o flag hidden: 2 = generated virtual, 3 = generated stored
        if r[1] == "total_amount" and r[6] in (2, 3):
            return True
    return False


def _rebuild_table(conn, table: str, ddl: str, after_copy=(), indexes=()) -> None:
    """
    Recria `table` a partir do template `ddl`, preservando todas as linhas.

    Sequência: FKs desligadas, BEGIN, tabela sombra, cópia das colunas
    comuns (colunas geradas ficam de fora), DROP, RENAME, COMMIT.
    Em falha tenta rollback e levanta MigrationError.
    """
    shadow = f"{table}_new"
    live_cols = [
        r[1] for r in conn.execute(f"PRAGMA table_xinfo({table});").fetchall() if r[6] == 0
    ]
    conn.commit()
    conn.execute("PRAGMA foreign_keys = OFF;")
    try:
        conn.execute("BEGIN")
        conn.execute(f"DROP TABLE IF EXISTS {shadow};")
        conn.execute(ddl.format(table=shadow))
        new_cols = [r[1] for r in _table_columns(conn, shadow)]
        cols = ", ".join(c for c in new_cols if c in live_cols)
        conn.execute(f"INSERT INTO {shadow} ({cols}) SELECT {cols} FROM {table};")
        for sql in after_copy:
            conn.execute(sql.format(table=shadow))
        copied = conn.execute(f"SELECT COUNT(*) FROM {shadow};").fetchone()[0]
        conn.execute(f"DROP TABLE {table};")
        conn.execute(f"ALTER TABLE {shadow} RENAME TO {table};")
        for sql in indexes:
            conn.execute(sql)
        violations = conn.execute("PRAGMA foreign_key_check;").fetchall()
        if violations:
            log_system_event(
                f"{table}_rebuild_fk_violations", {"count": len(violations)}, level="warning"
            )
        conn.commit()
        log_database_operation(table, "REBUILD", copied)
        print_system(f">> Tabela {table} reconstruída ({copied} linhas).")
    except sqlite3.Error as exc:
        try:
            conn.rollback()
        except sqlite3.Error as rb_exc:
            system_logger.error(f"MIGRATION_ROLLBACK_FAILED: {table} - {rb_exc}")
        log_system_event(f"{table}_rebuild_error", {"error": str(exc)}, level="error")
        raise MigrationError(f"Falha ao reconstruir a tabela {table}: {exc}") from exc
    finally:
        conn.execute("PRAGMA foreign_keys = ON;")


def _rebuild_animals(conn) -> None:
    _rebuild_table(
        conn,
        "animals",
        ANIMALS_DDL,
        indexes=["CREATE INDEX IF NOT EXISTS idx_animals_type_id ON animals(type_id);"],
    )


def _rebuild_milk_production(conn) -> None:
    _rebuild_table(
        conn,
        "milk_production",
        MILK_PRODUCTION_DDL,
        # o total passa a ser gravado; recalcula a partir de manhã + tarde
        after_copy=[
            "UPDATE {table} SET total_amount = "
            "COALESCE(morning_amount, 0) + COALESCE(evening_amount, 0);"
        ],
        indexes=[sql for sql in SCHEMA_V5 if " ON milk_production(" in sql],
    )


def _apply_v1(conn) -> None:
    for sql in SCHEMA_V1:
        conn.execute(sql)


def _apply_v2(conn) -> None:
    _ensure_column(conn, "animals", "father_breed", "father_breed TEXT")
    _ensure_column(conn, "animals", "mother_breed", "mother_breed TEXT")


def _apply_v3(conn) -> None:
    _ensure_column(conn, "animals", "image", "image TEXT")


def _apply_v4(conn) -> None:
    if _animals_needs_rebuild(conn):
        log_system_event("animals_rebuild_start")
        _rebuild_animals(conn)


def _apply_v5(conn) -> None:
    for sql in SCHEMA_V5:
        conn.execute(sql)


def _apply_v6(conn) -> None:
    if _milk_has_generated_total(conn):
        log_system_event("milk_production_rebuild_start")
        _rebuild_milk_production(conn)


def _seed_app_info(conn) -> None:
    cur = conn.execute(
        """
        INSERT INTO app_info (name, version, description)
        SELECT ?, ?, ?
        WHERE NOT EXISTS (SELECT 1 FROM app_info)
        """,
        (DEFAULTS.app_name, DEFAULTS.app_version, DEFAULTS.app_description),
    )
    if cur.rowcount:
        log_database_operation("app_info", "SEED", cur.rowcount)


MIGRATIONS = [
    (1, _apply_v1),
    (2, _apply_v2),
    (3, _apply_v3),
    (4, _apply_v4),
    (5, _apply_v5),
    (6, _apply_v6),
]


def schema_version(db: Database) -> int:
    return db.conn.execute("PRAGMA user_version;").fetchone()[0] or 0


def apply_migrations(db: Database) -> int:
    """Aplica migrações incrementais de acordo com PRAGMA user_version."""
    with db.session() as conn:
        ver = schema_version(db)

        for target, step in MIGRATIONS:
            if ver < target:
                step(conn)
                conn.execute(f"PRAGMA user_version = {target};")
                ver = target
                log_database_operation("schema", "MIGRATE", 0, version=target)
                print_system(f">> Migração v{target} aplicada.")

        _seed_app_info(conn)

    return ver
