# fazenda/config.py
"""
Configurações globais e valores padrão da aplicação da fazenda.
"""

import os
from dataclasses import dataclass


# Diretório de dados da instalação (banco, uploads, documentos)
DATA_DIR = os.environ.get("FAZENDA_DATA_DIR", os.getcwd())

# Caminho padrão do banco de dados SQLite
DB_PATH = os.path.join(DATA_DIR, "fazenda.db")


@dataclass
class DefaultConfig:
    """Valores padrão da aplicação."""
    app_name: str = "MyFarm"
    app_version: str = "1.0.0"
    app_description: str = "Gestão de rebanho, leite e caixa da fazenda"
    upcoming_events_limit: int = 10  # eventos futuros exibidos no painel
    last_week_days: int = 7          # janela da produção "última semana"
    chart_days: int = 30             # janela padrão do gráfico de leite


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
