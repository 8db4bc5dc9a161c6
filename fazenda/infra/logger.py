"""
Sistema de logging da aplicação da fazenda.

Este módulo configura e fornece loggers para registrar as operações
relevantes do sistema: chamadas de procedimentos, operações no banco de
dados, migrações e operações de arquivo (uploads e exportações).
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = False
# Flag global para habilitar/desabilitar prints/output
ENABLE_OUTPUT = False

def print_system(*args, **kwargs):
    """Print controlado pelo ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)

def set_logging(enabled: bool = True, output: Optional[bool] = None) -> None:
    """Liga/desliga o logging em tempo de execução (usado pela CLI)."""
    global ENABLE_LOGGING, ENABLE_OUTPUT
    ENABLE_LOGGING = enabled
    if output is not None:
        ENABLE_OUTPUT = output

# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove handlers existentes para não duplicar linhas em reimportações
    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    # Arquivo só é criado na primeira mensagem
    file_handler = logging.FileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger

# Diretório base para logs (na pasta do pacote)
BASE_DIR = Path(__file__).parent.parent
LOGS_DIR = BASE_DIR / "logs"

operation_logger = setup_logger(
    'fazenda.operations',
    str(LOGS_DIR / 'operations.log')
)

database_logger = setup_logger(
    'fazenda.database',
    str(LOGS_DIR / 'database.log')
)

system_logger = setup_logger(
    'fazenda.system',
    str(LOGS_DIR / 'system.log')
)

file_logger = setup_logger(
    'fazenda.files',
    str(LOGS_DIR / 'files.log')
)

def log_operation(procedure: str, args: Any = None, result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Registra a chamada de um procedimento da superfície de comandos.

    Args:
        procedure: Nome do procedimento (ex.: create-animal)
        args: Argumentos recebidos
        result: Resultado resumido (opcional)
        error: Mensagem de erro (opcional)
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    if error:
        operation_logger.error(f"PROCEDURE_FAILED: {procedure} - {error} - Args: {args}")
    else:
        operation_logger.info(f"PROCEDURE_SUCCESS: {procedure} - Result: {result} - Args: {args}")

def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    """
    Log específico para operações no banco de dados.

    Args:
        table: Nome da tabela
        operation: Operação SQL (INSERT, UPDATE, DELETE, SELECT, MIGRATE)
        affected_rows: Número de linhas afetadas
        **kwargs: Dados adicionais
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "table": table,
        "operation": operation,
        "affected_rows": affected_rows,
        **kwargs
    }
    database_logger.info(f"DB_{operation}: {log_data}")

def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "event": event,
        "details": details or {}
    }
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")

def log_file_operation(operation: str, file_path: str, **kwargs) -> None:
    """
    Log para operações de arquivo (upload de imagem/documento, exportação).

    Args:
        operation: Tipo de operação (save_image, save_document, export)
        file_path: Caminho do arquivo
        **kwargs: Dados adicionais
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return
    log_data = {
        "operation": operation,
        "file_path": file_path,
        "timestamp": datetime.now().isoformat(),
        **kwargs
    }
    file_logger.info(f"FILE_{operation.upper()}: {log_data}")

def get_log_summary(log_type: str = "operations", lines: int = 100) -> Optional[str]:
    """
    Obtém as linhas mais recentes de um log.

    Args:
        log_type: Tipo de log (operations, database, system, files)
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    if not (ENABLE_LOGGING or ENABLE_OUTPUT):
        return None

    log_files = {
        "operations": LOGS_DIR / "operations.log",
        "database": LOGS_DIR / "database.log",
        "system": LOGS_DIR / "system.log",
        "files": LOGS_DIR / "files.log",
    }

    log_file = log_files.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    with open(log_file, 'r', encoding='utf-8') as f:
        all_lines = f.readlines()
    return ''.join(all_lines[-lines:])
