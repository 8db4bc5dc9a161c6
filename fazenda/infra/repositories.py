# fazenda/infra/repositories.py
"""
Repositórios (DAO) para acesso e manipulação de dados no SQLite.

Classes:
- AppInfoRepo
- AnimalTypeRepo
- AnimalRepo
- DocumentRepo
- HealthRecordRepo
- TransactionRepo
- MilkProductionRepo

Convenções comuns:
- get_by_id devolve None quando o registro não existe (nunca levanta).
- update(id, data) é parcial: chave ausente mantém o valor gravado,
  chave presente com None limpa a coluna. Devolve None se o id não existe.
- delete de id inexistente é no-op silencioso.
- Erros do SQLite (constraint, FK) sobem sem tratamento.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, is_dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from fazenda.config import DEFAULTS
from fazenda.domain.formulas import com_saldo_mensal, data_corte, hoje_iso, saldo, total_ordenha
from .db import Database
from .mappers import ANIMAL_COLUMNS, animal_from_row, animal_to_db_params, row_to_dict


# -------------------------
# Helpers
# -------------------------

def _as_dict(row: Any) -> Dict[str, Any]:
    if isinstance(row, Mapping):
        return dict(row)
    if is_dataclass(row):
        return asdict(row)
    raise TypeError("row must be dict or dataclass")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _rows(cur) -> List[Dict[str, Any]]:
    return [row_to_dict(r) for r in cur.fetchall()]


def _merge(current: Mapping[str, Any], data: Mapping[str, Any], columns: Iterable[str]) -> Dict[str, Any]:
    """Valor novo quando a chave veio em `data`, senão o valor gravado."""
    return {col: (data[col] if col in data else current[col]) for col in columns}


def _update_row(c, table: str, row_id: int, values: Dict[str, Any]) -> None:
    sets = ", ".join(f"{col} = :{col}" for col in values)
    c.execute(
        f"UPDATE {table} SET {sets}, updated_at = :updated_at WHERE id = :id",
        {**values, "updated_at": _now_iso(), "id": row_id},
    )


# -------------------------
# App info
# -------------------------

class AppInfoRepo:
    COLUMNS = ["name", "version", "description"]

    def __init__(self, db: Database):
        self.db = db

    def get(self) -> Optional[Dict[str, Any]]:
        """Linha mais recente de app_info."""
        with self.db.session() as c:
            row = c.execute("SELECT * FROM app_info ORDER BY id DESC LIMIT 1").fetchone()
            return row_to_dict(row)

    def update(self, data: Any) -> Optional[Dict[str, Any]]:
        current = self.get()
        if current is None:
            return None
        values = _merge(current, _as_dict(data), self.COLUMNS)
        with self.db.session() as c:
            # app_info não tem updated_at
            c.execute(
                "UPDATE app_info SET name = :name, version = :version, description = :description "
                "WHERE id = :id",
                {**values, "id": current["id"]},
            )
        return self.get()


# -------------------------
# Tipos de animal
# -------------------------

class AnimalTypeRepo:
    COLUMNS = ["name", "description"]

    def __init__(self, db: Database):
        self.db = db

    def get_all(self) -> List[Dict[str, Any]]:
        with self.db.session() as c:
            return _rows(c.execute("SELECT * FROM animal_types ORDER BY name"))

    def get_by_id(self, type_id: int) -> Optional[Dict[str, Any]]:
        with self.db.session() as c:
            row = c.execute("SELECT * FROM animal_types WHERE id = ?", (type_id,)).fetchone()
            return row_to_dict(row)

    def create(self, data: Any) -> Dict[str, Any]:
        r = _as_dict(data)
        now = _now_iso()
        with self.db.session() as c:
            cur = c.execute(
                """
                INSERT INTO animal_types (name, description, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                """,
                (r.get("name"), r.get("description"), now, now),
            )
            new_id = cur.lastrowid
        return self.get_by_id(new_id)

    def update(self, type_id: int, data: Any) -> Optional[Dict[str, Any]]:
        current = self.get_by_id(type_id)
        if current is None:
            return None
        values = _merge(current, _as_dict(data), self.COLUMNS)
        with self.db.session() as c:
            _update_row(c, "animal_types", type_id, values)
        return self.get_by_id(type_id)

    def delete(self, type_id: int) -> None:
        """Remove o tipo; os animais do tipo caem junto (ON DELETE CASCADE)."""
        with self.db.session() as c:
            c.execute("DELETE FROM animal_types WHERE id = ?", (type_id,))


# -------------------------
# Animais
# -------------------------

class AnimalRepo:
    _SELECT = """
        SELECT
            a.*,
            at.name        AS type_name,
            at.description AS type_description
        FROM animals a
        LEFT JOIN animal_types at ON a.type_id = at.id
    """

    def __init__(self, db: Database):
        self.db = db

    @staticmethod
    def _documents_by_animal(c, animal_id: Optional[int] = None) -> Dict[int, List[str]]:
        sql = "SELECT animal_id, filename FROM animal_documents"
        params: tuple = ()
        if animal_id is not None:
            sql += " WHERE animal_id = ?"
            params = (animal_id,)
        sql += " ORDER BY created_at ASC, id ASC"
        docs: Dict[int, List[str]] = defaultdict(list)
        for animal, filename in c.execute(sql, params).fetchall():
            docs[animal].append(filename)
        return docs

    def get_all(self, type_id: Optional[int] = None) -> List[Dict[str, Any]]:
        sql = self._SELECT
        params: tuple = ()
        if type_id is not None:
            sql += " WHERE a.type_id = ?"
            params = (type_id,)
        sql += " ORDER BY a.id"
        with self.db.session() as c:
            rows = c.execute(sql, params).fetchall()
            docs = self._documents_by_animal(c)
        return [animal_from_row(r, docs.get(r["id"])) for r in rows]

    def get_by_id(self, animal_id: int) -> Optional[Dict[str, Any]]:
        with self.db.session() as c:
            row = c.execute(self._SELECT + " WHERE a.id = ?", (animal_id,)).fetchone()
            if row is None:
                return None
            docs = self._documents_by_animal(c, animal_id)
        return animal_from_row(row, docs.get(animal_id))

    def create(self, data: Any) -> Dict[str, Any]:
        params = animal_to_db_params(_as_dict(data))
        now = _now_iso()
        cols = ANIMAL_COLUMNS + ["created_at", "updated_at"]
        with self.db.session() as c:
            cur = c.execute(
                f"INSERT INTO animals ({', '.join(cols)}) "
                f"VALUES ({', '.join(':' + col for col in cols)})",
                {**params, "created_at": now, "updated_at": now},
            )
            new_id = cur.lastrowid
        return self.get_by_id(new_id)

    def update(self, animal_id: int, data: Any) -> Optional[Dict[str, Any]]:
        with self.db.session() as c:
            current = c.execute("SELECT * FROM animals WHERE id = ?", (animal_id,)).fetchone()
        if current is None:
            return None
        changes = animal_to_db_params(_as_dict(data), partial=True)
        values = _merge(row_to_dict(current), changes, ANIMAL_COLUMNS)
        with self.db.session() as c:
            _update_row(c, "animals", animal_id, values)
        return self.get_by_id(animal_id)

    def delete(self, animal_id: int) -> None:
        with self.db.session() as c:
            c.execute("DELETE FROM animals WHERE id = ?", (animal_id,))

    def get_stats(self) -> Dict[str, Any]:
        """
        Totais do rebanho e o tipo mais comum.

        Empate na contagem: vence o tipo com nome alfabeticamente menor.
        """
        with self.db.session() as c:
            totals = c.execute(
                """
                SELECT
                    (SELECT COUNT(DISTINCT type_id) FROM animals) AS totalTypes,
                    (SELECT COUNT(*) FROM animals)                AS totalAnimals
                """
            ).fetchone()
            top = c.execute(
                """
                SELECT at.name AS name, COUNT(a.id) AS count
                FROM animals a
                JOIN animal_types at ON at.id = a.type_id
                GROUP BY at.id, at.name
                ORDER BY count DESC, at.name ASC
                LIMIT 1
                """
            ).fetchone()
        return {
            "totalTypes": totals["totalTypes"] or 0,
            "totalAnimals": totals["totalAnimals"] or 0,
            "mostCommonType": top["name"] if top else "None",
            "mostCommonTypeCount": top["count"] if top else 0,
        }

    def get_type_counts(self) -> List[Dict[str, Any]]:
        """Contagem por tipo; tipos sem animais aparecem com count 0."""
        with self.db.session() as c:
            rows = c.execute(
                """
                SELECT at.name AS name, COUNT(a.id) AS count
                FROM animal_types at
                LEFT JOIN animals a ON a.type_id = at.id
                GROUP BY at.id, at.name
                ORDER BY count DESC, at.name ASC
                """
            ).fetchall()
        return [{"name": r["name"], "count": int(r["count"])} for r in rows]


# -------------------------
# Documentos
# -------------------------

class DocumentRepo:
    COLUMNS = ["filename", "original_name", "file_path", "file_size", "mime_type"]

    def __init__(self, db: Database):
        self.db = db

    def get_by_animal(self, animal_id: int) -> List[str]:
        """Nomes de arquivo do animal, do mais antigo para o mais novo."""
        with self.db.session() as c:
            rows = c.execute(
                "SELECT filename FROM animal_documents WHERE animal_id = ? "
                "ORDER BY created_at ASC, id ASC",
                (animal_id,),
            ).fetchall()
        return [r["filename"] for r in rows]

    def get_details_by_animal(self, animal_id: int) -> List[Dict[str, Any]]:
        with self.db.session() as c:
            return _rows(c.execute(
                "SELECT * FROM animal_documents WHERE animal_id = ? ORDER BY created_at ASC, id ASC",
                (animal_id,),
            ))

    def get_by_id(self, document_id: int) -> Optional[Dict[str, Any]]:
        with self.db.session() as c:
            row = c.execute("SELECT * FROM animal_documents WHERE id = ?", (document_id,)).fetchone()
            return row_to_dict(row)

    def get_details(self, animal_id: int, filename: str) -> Optional[Dict[str, Any]]:
        with self.db.session() as c:
            row = c.execute(
                "SELECT * FROM animal_documents WHERE animal_id = ? AND filename = ?",
                (animal_id, filename),
            ).fetchone()
            return row_to_dict(row)

    def add(
        self,
        animal_id: int,
        filename: str,
        original_name: str,
        file_path: Optional[str] = None,
        file_size: Optional[int] = None,
        mime_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        with self.db.session() as c:
            cur = c.execute(
                """
                INSERT INTO animal_documents
                    (animal_id, filename, original_name, file_path, file_size, mime_type, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (animal_id, filename, original_name, file_path, file_size, mime_type, _now_iso()),
            )
            new_id = cur.lastrowid
        return self.get_by_id(new_id)

    def create(self, data: Any) -> Dict[str, Any]:
        r = _as_dict(data)
        return self.add(
            r.get("animal_id"),
            r.get("filename"),
            r.get("original_name"),
            r.get("file_path"),
            r.get("file_size"),
            r.get("mime_type"),
        )

    def update(self, document_id: int, data: Any) -> Optional[Dict[str, Any]]:
        current = self.get_by_id(document_id)
        if current is None:
            return None
        values = _merge(current, _as_dict(data), self.COLUMNS)
        sets = ", ".join(f"{col} = :{col}" for col in values)
        with self.db.session() as c:
            # animal_documents não tem updated_at
            c.execute(
                f"UPDATE animal_documents SET {sets} WHERE id = :id",
                {**values, "id": document_id},
            )
        return self.get_by_id(document_id)

    def delete(self, document_id: int) -> None:
        with self.db.session() as c:
            c.execute("DELETE FROM animal_documents WHERE id = ?", (document_id,))

    def remove(self, animal_id: int, filename: str) -> None:
        with self.db.session() as c:
            c.execute(
                "DELETE FROM animal_documents WHERE animal_id = ? AND filename = ?",
                (animal_id, filename),
            )

    def remove_all(self, animal_id: int) -> None:
        with self.db.session() as c:
            c.execute("DELETE FROM animal_documents WHERE animal_id = ?", (animal_id,))


# -------------------------
# Registros sanitários
# -------------------------

class HealthRecordRepo:
    # animal_id não é alterável depois de criado
    COLUMNS = ["record_type", "date", "expected_delivery_date", "notes"]

    def __init__(self, db: Database):
        self.db = db

    def get_all(self, record_type: Optional[str] = None) -> List[Dict[str, Any]]:
        sql = "SELECT * FROM animal_health_records"
        params: tuple = ()
        if record_type is not None:
            sql += " WHERE record_type = ?"
            params = (record_type,)
        sql += " ORDER BY date DESC, created_at DESC"
        with self.db.session() as c:
            return _rows(c.execute(sql, params))

    def get_by_animal(self, animal_id: int, record_type: Optional[str] = None) -> List[Dict[str, Any]]:
        sql = "SELECT * FROM animal_health_records WHERE animal_id = ?"
        params: tuple = (animal_id,)
        if record_type is not None:
            sql += " AND record_type = ?"
            params = (animal_id, record_type)
        sql += " ORDER BY date DESC, created_at DESC"
        with self.db.session() as c:
            return _rows(c.execute(sql, params))

    def get_by_id(self, record_id: int) -> Optional[Dict[str, Any]]:
        with self.db.session() as c:
            row = c.execute("SELECT * FROM animal_health_records WHERE id = ?", (record_id,)).fetchone()
            return row_to_dict(row)

    def create(self, data: Any) -> Dict[str, Any]:
        r = _as_dict(data)
        now = _now_iso()
        with self.db.session() as c:
            cur = c.execute(
                """
                INSERT INTO animal_health_records
                    (animal_id, record_type, date, expected_delivery_date, notes, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    r.get("animal_id"),
                    r.get("record_type"),
                    r.get("date"),
                    r.get("expected_delivery_date") or None,
                    r.get("notes") or None,
                    now,
                    now,
                ),
            )
            new_id = cur.lastrowid
        return self.get_by_id(new_id)

    def update(self, record_id: int, data: Any) -> Optional[Dict[str, Any]]:
        current = self.get_by_id(record_id)
        if current is None:
            return None
        values = _merge(current, _as_dict(data), self.COLUMNS)
        with self.db.session() as c:
            _update_row(c, "animal_health_records", record_id, values)
        return self.get_by_id(record_id)

    def delete(self, record_id: int) -> None:
        with self.db.session() as c:
            c.execute("DELETE FROM animal_health_records WHERE id = ?", (record_id,))

    def get_upcoming_events(self, today: Optional[date] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Próximos eventos de todos os animais.

        Inseminações com previsão de parto >= hoje e vermifugações com
        data >= hoje, em ordem crescente da data relevante, no máximo
        `limit` linhas (padrão: DEFAULTS.upcoming_events_limit).
        """
        ref = hoje_iso(today)
        limit = DEFAULTS.upcoming_events_limit if limit is None else limit
        with self.db.session() as c:
            return _rows(c.execute(
                """
                SELECT
                    ahr.*,
                    a.name       AS animal_name,
                    a.tag_number AS tag_number
                FROM animal_health_records ahr
                JOIN animals a ON ahr.animal_id = a.id
                WHERE
                    (ahr.record_type = 'insemination'
                        AND ahr.expected_delivery_date IS NOT NULL
                        AND ahr.expected_delivery_date >= ?)
                    OR (ahr.record_type = 'deworming' AND ahr.date >= ?)
                ORDER BY
                    CASE
                        WHEN ahr.record_type = 'insemination' THEN ahr.expected_delivery_date
                        ELSE ahr.date
                    END ASC,
                    ahr.id ASC
                LIMIT ?
                """,
                (ref, ref, limit),
            ))


# -------------------------
# Fluxo de caixa
# -------------------------

class TransactionRepo:
    COLUMNS = ["type", "name", "amount", "date"]
    _ORDER = " ORDER BY date DESC, created_at DESC"

    def __init__(self, db: Database):
        self.db = db

    def get_all(self) -> List[Dict[str, Any]]:
        with self.db.session() as c:
            return _rows(c.execute("SELECT * FROM transactions" + self._ORDER))

    def get_by_id(self, transaction_id: int) -> Optional[Dict[str, Any]]:
        with self.db.session() as c:
            row = c.execute("SELECT * FROM transactions WHERE id = ?", (transaction_id,)).fetchone()
            return row_to_dict(row)

    def create(self, data: Any) -> Dict[str, Any]:
        r = _as_dict(data)
        now = _now_iso()
        with self.db.session() as c:
            cur = c.execute(
                """
                INSERT INTO transactions (type, name, amount, date, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (r.get("type"), r.get("name"), r.get("amount"), r.get("date"), now, now),
            )
            new_id = cur.lastrowid
        return self.get_by_id(new_id)

    def update(self, transaction_id: int, data: Any) -> Optional[Dict[str, Any]]:
        current = self.get_by_id(transaction_id)
        if current is None:
            return None
        values = _merge(current, _as_dict(data), self.COLUMNS)
        with self.db.session() as c:
            _update_row(c, "transactions", transaction_id, values)
        return self.get_by_id(transaction_id)

    def delete(self, transaction_id: int) -> None:
        with self.db.session() as c:
            c.execute("DELETE FROM transactions WHERE id = ?", (transaction_id,))

    def get_summary(self) -> Dict[str, Any]:
        """Receitas, despesas, saldo e quantidade de lançamentos."""
        with self.db.session() as c:
            row = c.execute(
                """
                SELECT
                    COALESCE(SUM(CASE WHEN type = 'income'  THEN amount ELSE 0 END), 0) AS totalIncome,
                    COALESCE(SUM(CASE WHEN type = 'expense' THEN amount ELSE 0 END), 0) AS totalExpense,
                    COUNT(*) AS transactionCount
                FROM transactions
                """
            ).fetchone()
        income = float(row["totalIncome"] or 0)
        expense = float(row["totalExpense"] or 0)
        return {
            "totalIncome": income,
            "totalExpense": expense,
            "balance": saldo(income, expense),
            "transactionCount": int(row["transactionCount"] or 0),
        }

    def get_by_date_range(self, start_date: str, end_date: str) -> List[Dict[str, Any]]:
        with self.db.session() as c:
            return _rows(c.execute(
                "SELECT * FROM transactions WHERE date BETWEEN ? AND ?" + self._ORDER,
                (start_date, end_date),
            ))

    def get_by_type(self, transaction_type: str) -> List[Dict[str, Any]]:
        with self.db.session() as c:
            return _rows(c.execute(
                "SELECT * FROM transactions WHERE type = ?" + self._ORDER,
                (transaction_type,),
            ))

    def get_monthly_stats(self, year: int) -> List[Dict[str, Any]]:
        """Receita/despesa/saldo por mês (1–12) do ano; meses vazios não aparecem."""
        with self.db.session() as c:
            rows = _rows(c.execute(
                """
                SELECT
                    CAST(strftime('%m', date) AS INTEGER) AS month,
                    COALESCE(SUM(CASE WHEN type = 'income'  THEN amount ELSE 0 END), 0) AS income,
                    COALESCE(SUM(CASE WHEN type = 'expense' THEN amount ELSE 0 END), 0) AS expense
                FROM transactions
                WHERE strftime('%Y', date) = ?
                GROUP BY strftime('%m', date)
                ORDER BY month
                """,
                (str(year),),
            ))
        return com_saldo_mensal(rows)


# -------------------------
# Produção de leite
# -------------------------

class MilkProductionRepo:
    COLUMNS = ["animal_id", "date", "morning_amount", "evening_amount", "notes"]

    def __init__(self, db: Database):
        self.db = db

    def get_all(self) -> List[Dict[str, Any]]:
        with self.db.session() as c:
            return _rows(c.execute("SELECT * FROM milk_production ORDER BY date DESC, animal_id"))

    def get_by_animal(self, animal_id: int) -> List[Dict[str, Any]]:
        with self.db.session() as c:
            return _rows(c.execute(
                "SELECT * FROM milk_production WHERE animal_id = ? ORDER BY date DESC",
                (animal_id,),
            ))

    def get_by_date_range(self, start_date: str, end_date: str) -> List[Dict[str, Any]]:
        with self.db.session() as c:
            return _rows(c.execute(
                """
                SELECT mp.*, a.name AS animal_name
                FROM milk_production mp
                LEFT JOIN animals a ON mp.animal_id = a.id
                WHERE mp.date BETWEEN ? AND ?
                ORDER BY mp.date DESC, a.name
                """,
                (start_date, end_date),
            ))

    def get_by_id(self, record_id: int) -> Optional[Dict[str, Any]]:
        with self.db.session() as c:
            row = c.execute("SELECT * FROM milk_production WHERE id = ?", (record_id,)).fetchone()
            return row_to_dict(row)

    @staticmethod
    def _amounts(values: Dict[str, Any]) -> Dict[str, Any]:
        """Normaliza manhã/tarde (None -> 0) e grava o total derivado."""
        morning = values.get("morning_amount")
        evening = values.get("evening_amount")
        values["morning_amount"] = float(morning) if morning is not None else 0.0
        values["evening_amount"] = float(evening) if evening is not None else 0.0
        values["total_amount"] = total_ordenha(morning, evening)
        return values

    def create(self, data: Any) -> Dict[str, Any]:
        r = _as_dict(data)
        values = self._amounts({col: r.get(col) for col in self.COLUMNS})
        now = _now_iso()
        with self.db.session() as c:
            cur = c.execute(
                """
                INSERT INTO milk_production
                    (animal_id, date, morning_amount, evening_amount, total_amount, notes,
                     created_at, updated_at)
                VALUES
                    (:animal_id, :date, :morning_amount, :evening_amount, :total_amount, :notes,
                     :created_at, :updated_at)
                """,
                {**values, "created_at": now, "updated_at": now},
            )
            new_id = cur.lastrowid
        return self.get_by_id(new_id)

    def update(self, record_id: int, data: Any) -> Optional[Dict[str, Any]]:
        current = self.get_by_id(record_id)
        if current is None:
            return None
        values = self._amounts(_merge(current, _as_dict(data), self.COLUMNS))
        with self.db.session() as c:
            _update_row(c, "milk_production", record_id, values)
        return self.get_by_id(record_id)

    def delete(self, record_id: int) -> None:
        with self.db.session() as c:
            c.execute("DELETE FROM milk_production WHERE id = ?", (record_id,))

    def get_production_stats(self, animal_id: Optional[int] = None, today: Optional[date] = None) -> Dict[str, Any]:
        """Quantidade, soma, média por registro e soma dos últimos 7 dias."""
        where = " WHERE animal_id = ?" if animal_id is not None else ""
        params: tuple = (animal_id,) if animal_id is not None else ()
        cutoff = data_corte(DEFAULTS.last_week_days, today)
        with self.db.session() as c:
            row = c.execute(
                f"""
                SELECT
                    COUNT(*)                          AS totalRecords,
                    COALESCE(SUM(total_amount), 0)    AS totalProduction,
                    COALESCE(AVG(total_amount), 0)    AS averageDaily
                FROM milk_production{where}
                """,
                params,
            ).fetchone()
            week = c.execute(
                "SELECT COALESCE(SUM(total_amount), 0) FROM milk_production WHERE date >= ?"
                + (" AND animal_id = ?" if animal_id is not None else ""),
                (cutoff,) + params,
            ).fetchone()[0]
        return {
            "totalRecords": int(row["totalRecords"] or 0),
            "totalProduction": float(row["totalProduction"] or 0),
            "averageDaily": float(row["averageDaily"] or 0),
            "lastWeekProduction": float(week or 0),
        }

    def get_chart_data(
        self,
        animal_id: Optional[int] = None,
        days: Optional[int] = None,
        today: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        """Totais diários (manhã, tarde, total) dos últimos `days` dias."""
        cutoff = data_corte(DEFAULTS.chart_days if days is None else days, today)
        sql = """
            SELECT
                date,
                SUM(total_amount)   AS total,
                SUM(morning_amount) AS morning,
                SUM(evening_amount) AS evening
            FROM milk_production
            WHERE date >= ?
        """
        params: tuple = (cutoff,)
        if animal_id is not None:
            sql += " AND animal_id = ?"
            params = (cutoff, animal_id)
        sql += " GROUP BY date ORDER BY date ASC"
        with self.db.session() as c:
            return _rows(c.execute(sql, params))
