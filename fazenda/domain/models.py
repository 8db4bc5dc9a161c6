"""
Modelos (dataclasses) do domínio.

Observação importante:
- Os repositórios aceitam dicionários; as dataclasses são opcionais
  e servem para tipagem/clareza na criação de registros.
- Animais trafegam como dicionários camelCase (ver infra/mappers.py).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


GENDERS = ("MALE", "FEMALE", "CASTRATED", "UNKNOWN")
DEFAULT_GENDER = "UNKNOWN"

TRANSACTION_TYPES = ("income", "expense")

HEALTH_RECORD_TYPES = ("insemination", "deworming")


@dataclass
class AppInfo:
    """Metadados da aplicação (linha única na tabela `app_info`)."""
    name: str
    version: str
    description: Optional[str] = None


@dataclass
class AnimalType:
    """Cadastro de tipo de animal (ex.: Vaca, Cabra)."""
    name: str
    description: Optional[str] = None


@dataclass
class Transaction:
    """Lançamento do fluxo de caixa."""
    type: str                    # 'income' | 'expense'
    name: str
    amount: float                # sempre > 0; o sinal vem de `type`
    date: str                    # YYYY-MM-DD


@dataclass
class HealthRecord:
    """Evento sanitário/reprodutivo de um animal."""
    animal_id: int
    record_type: str                              # 'insemination' | 'deworming'
    date: str
    expected_delivery_date: Optional[str] = None  # só faz sentido em inseminação
    notes: Optional[str] = None


@dataclass
class MilkProduction:
    """Ordenha diária de um animal (manhã + tarde)."""
    animal_id: int
    date: str
    morning_amount: float = 0.0
    evening_amount: float = 0.0
    notes: Optional[str] = None


@dataclass
class AnimalDocument:
    """Documento anexado a um animal (arquivo salvo pelo FileStore)."""
    animal_id: int
    filename: str
    original_name: str
    file_path: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
