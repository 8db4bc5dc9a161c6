# fazenda/adapters/commands.py
"""
Superfície de comandos: um procedimento nomeado por operação dos repositórios.

Os nomes seguem os canais da aplicação desktop (get-animals, create-animal,
get-cashflow-summary, ...). Cada procedimento recebe dados simples e devolve
dados simples, ou None quando o registro não existe.

Falhas viram CommandError com a mensagem original do SQLite (ou do
armazenamento de arquivos) e um `kind` para a interface decidir o texto:
- constraint        -> sqlite3.IntegrityError (UNIQUE, FOREIGN KEY, CHECK, NOT NULL)
- storage           -> demais sqlite3.Error
- io                -> OSError do FileStore
- bad_arguments     -> TypeError/ValueError na chamada
- unknown_procedure -> nome não registrado
"""

from __future__ import annotations

import os
import sqlite3
from typing import Any, Callable, Dict, List, Optional

from fazenda.config import DATA_DIR
from fazenda.infra.db import Database
from fazenda.infra.logger import log_database_operation, log_operation, log_system_event
from fazenda.infra.repositories import (
    AnimalRepo,
    AnimalTypeRepo,
    AppInfoRepo,
    DocumentRepo,
    HealthRecordRepo,
    MilkProductionRepo,
    TransactionRepo,
)
from fazenda.adapters.excel_export import export_animals, export_transactions
from fazenda.adapters.file_store import FileStore


_ABSENT = object()


class CommandError(Exception):
    def __init__(self, message: str, kind: str = "storage"):
        super().__init__(message)
        self.message = message
        self.kind = kind


class CommandSurface:
    """Registra os procedimentos sobre um único Database injetado."""

    def __init__(self, db: Database, files: Optional[FileStore] = None):
        self.db = db
        if files is None:
            base = DATA_DIR if db.path == ":memory:" else os.path.dirname(os.path.abspath(db.path))
            files = FileStore(base)
        self.files = files

        self.app_info = AppInfoRepo(db)
        self.animal_types = AnimalTypeRepo(db)
        self.animals = AnimalRepo(db)
        self.documents = DocumentRepo(db)
        self.health_records = HealthRecordRepo(db)
        self.transactions = TransactionRepo(db)
        self.milk = MilkProductionRepo(db)

        self._procedures: Dict[str, Callable[..., Any]] = {
            # app info
            "get-app-info": self.app_info.get,
            "update-app-info": self.app_info.update,
            # tipos de animal
            "get-animal-types": self.animal_types.get_all,
            "get-animal-type": self.animal_types.get_by_id,
            "create-animal-type": self._create_animal_type,
            "update-animal-type": self._update_animal_type,
            "delete-animal-type": self.animal_types.delete,
            # animais
            "get-animals": self.animals.get_all,
            "get-animal": self.animals.get_by_id,
            "create-animal": self.animals.create,
            "update-animal": self.animals.update,
            "delete-animal": self.animals.delete,
            "get-animal-stats": self.animals.get_stats,
            "get-animal-type-counts": self.animals.get_type_counts,
            "export-animals-excel": self._export_animals,
            # documentos e imagens
            "get-animal-documents": self.documents.get_by_animal,
            "add-animal-document": self.documents.add,
            "remove-animal-document": self.documents.remove,
            "remove-animal-documents": self.documents.remove_all,
            "get-animal-document": self.documents.get_by_id,
            "get-animal-document-details": self.documents.get_details,
            "get-animal-documents-details": self.documents.get_details_by_animal,
            "update-animal-document": self.documents.update,
            "delete-animal-document": self.documents.delete,
            "save-document": self.files.save_document,
            "get-document-path": self.files.get_document_path,
            "save-image": self.files.save_image,
            "get-image-path": self.files.get_image_data_url,
            "get-image-paths": self.files.get_image_data_urls,
            # fluxo de caixa
            "get-transactions": self.transactions.get_all,
            "get-transaction": self.transactions.get_by_id,
            "create-transaction": self.transactions.create,
            "update-transaction": self.transactions.update,
            "delete-transaction": self._delete_transaction,
            "get-cashflow-summary": self.transactions.get_summary,
            "get-transactions-by-date-range": self.transactions.get_by_date_range,
            "get-transactions-by-type": self.transactions.get_by_type,
            "get-monthly-stats": self.transactions.get_monthly_stats,
            "export-transactions-excel": self._export_transactions,
            # registros sanitários
            "get-health-records": self.health_records.get_by_animal,
            "get-health-records-by-type": self.health_records.get_by_animal,
            "get-all-health-records": self.health_records.get_all,
            "get-health-record": self.health_records.get_by_id,
            "create-health-record": self.health_records.create,
            "update-health-record": self.health_records.update,
            "delete-health-record": self.health_records.delete,
            "get-upcoming-events": self.health_records.get_upcoming_events,
            # produção de leite
            "get-milk-production": self.milk.get_all,
            "get-milk-production-by-animal": self.milk.get_by_animal,
            "get-milk-production-by-date-range": self.milk.get_by_date_range,
            "get-milk-production-by-id": self.milk.get_by_id,
            "create-milk-production": self.milk.create,
            "update-milk-production": self.milk.update,
            "delete-milk-production": self.milk.delete,
            "get-milk-production-stats": self.milk.get_production_stats,
            "get-milk-production-chart-data": self.milk.get_chart_data,
        }

    # -----------------------
    # procedimentos compostos
    # -----------------------

    def _create_animal_type(self, name: str, description: Optional[str] = None) -> Dict[str, Any]:
        return self.animal_types.create({"name": name, "description": description})

    def _update_animal_type(self, type_id: int, name: Any = _ABSENT, description: Any = _ABSENT) -> Optional[Dict[str, Any]]:
        data = {}
        if name is not _ABSENT:
            data["name"] = name
        if description is not _ABSENT:
            data["description"] = description
        return self.animal_types.update(type_id, data)

    def _delete_transaction(self, transaction_id: int) -> int:
        self.transactions.delete(transaction_id)
        return transaction_id

    def _export_transactions(self, path: str) -> Dict[str, Any]:
        return export_transactions(self.transactions.get_all(), self.transactions.get_summary(), path)

    def _export_animals(self, path: str) -> Dict[str, Any]:
        return export_animals(self.animals.get_all(), self.animals.get_stats(), path)

    # -----------------------
    # despacho
    # -----------------------

    @property
    def procedures(self) -> List[str]:
        return sorted(self._procedures)

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Executa o procedimento `name`; falhas viram CommandError."""
        fn = self._procedures.get(name)
        if fn is None:
            log_system_event("unknown_procedure", {"name": name}, level="warning")
            raise CommandError(f"Unknown procedure: {name}", kind="unknown_procedure")

        try:
            result = fn(*args, **kwargs)
        except sqlite3.IntegrityError as exc:
            self._fail(name, args, exc)
            raise CommandError(str(exc), kind="constraint") from exc
        except sqlite3.Error as exc:
            self._fail(name, args, exc)
            raise CommandError(str(exc), kind="storage") from exc
        except OSError as exc:
            self._fail(name, args, exc)
            raise CommandError(str(exc), kind="io") from exc
        except (TypeError, ValueError) as exc:
            self._fail(name, args, exc)
            raise CommandError(str(exc), kind="bad_arguments") from exc

        if name.startswith(("create-", "update-", "delete-", "add-", "remove-")):
            log_database_operation(name.split("-", 1)[1], name.split("-", 1)[0].upper(), 1)
        log_operation(name, args, result=type(result).__name__)
        return result

    @staticmethod
    def _fail(name: str, args: Any, exc: Exception) -> None:
        log_operation(name, args, error=str(exc))
        log_system_event("procedure_error", {"name": name, "error": str(exc)}, level="error")
