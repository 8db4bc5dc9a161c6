# fazenda/adapters/cli.py
"""
CLI da fazenda (Typer).

Comandos principais:
- migrate                    -> aplica migrações e mostra a versão do schema
- procedures                 -> lista os procedimentos da superfície de comandos
- call <nome> [args...]      -> executa um procedimento (args em JSON) e imprime JSON
- animals / types            -> rebanho e tipos em tabela
- transactions / summary     -> lançamentos e resumo do caixa
- milk-stats                 -> estatísticas de produção de leite
- events                     -> próximos partos e vermifugações
- export transactions|animals <xlsx>
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from fazenda.config import DB_PATH
from fazenda.infra.db import Database
from fazenda.infra.logger import set_logging
from fazenda.infra.migrations import MigrationError, apply_migrations
from fazenda.adapters.commands import CommandError, CommandSurface


app = typer.Typer(help="Fazenda - CLI")
console = Console()


@app.callback()
def main_callback(
    log: bool = typer.Option(False, "--log", help="Grava logs em fazenda/logs/"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Mostra o progresso das migrações"),
):
    set_logging(log, output=verbose)


# -----------------------
# util
# -----------------------

@contextmanager
def _surface(db_path: str) -> Iterator[CommandSurface]:
    """Abre o banco, migra e entrega a superfície de comandos."""
    try:
        db = Database.open(db_path)
    except Exception as e:
        typer.echo(f"Erro ao abrir o banco {db_path}: {e}", err=True)
        raise typer.Exit(code=1)
    with db:
        try:
            apply_migrations(db)
        except MigrationError as e:
            typer.echo(f"Erro de migração: {e}", err=True)
            raise typer.Exit(code=1)
        yield CommandSurface(db)


def _run(db_path: str, name: str, *args: Any) -> Any:
    with _surface(db_path) as surface:
        try:
            return surface.call(name, *args)
        except CommandError as e:
            typer.echo(f"Erro ({e.kind}): {e.message}", err=True)
            raise typer.Exit(code=1)


def _parse_arg(raw: str) -> Any:
    """Argumento da linha de comando: JSON quando possível, senão string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2, default=str))


def _fmt(val: Any) -> str:
    if val is None:
        return ""
    if isinstance(val, float):
        return f"{val:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return str(val)


def _display_table(data: Dict[str, Any] | List[Dict[str, Any]], title: str = "Resultado",
                   columns: Optional[List[str]] = None) -> None:
    """Exibe os dados em tabelas formatadas usando Rich."""
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return

    if isinstance(data, list):
        columns = columns or list(data[0].keys())
        table = Table(title=title, box=box.ROUNDED)
        for column in columns:
            sample = data[0].get(column)
            justify = "right" if isinstance(sample, (int, float)) and not isinstance(sample, bool) else "left"
            table.add_column(column, justify=justify)
        for row in data:
            table.add_row(*[_fmt(row.get(col)) for col in columns])
        console.print(table)
        return

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Campo")
    table.add_column("Valor", justify="right")
    for chave, valor in data.items():
        table.add_row(str(chave), _fmt(valor))
    console.print(table)


# -----------------------
# comandos de infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")):
    """Aplica migrações (idempotente)."""
    with _surface(db_path) as surface:
        version = surface.db.conn.execute("PRAGMA user_version;").fetchone()[0]
    typer.echo(f">> Schema na versão {version} em: {db_path}")


@app.command("procedures")
def cmd_procedures(db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")):
    """Lista os procedimentos disponíveis para `call`."""
    with _surface(db_path) as surface:
        for name in surface.procedures:
            typer.echo(name)


@app.command("call")
def cmd_call(
    name: str = typer.Argument(..., help="Ex.: get-animals | create-transaction"),
    args: Optional[List[str]] = typer.Argument(None, help="Argumentos posicionais (JSON ou texto)"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Executa um procedimento e imprime o resultado em JSON."""
    parsed = [_parse_arg(a) for a in (args or [])]
    _print_json(_run(db_path, name, *parsed))


# -----------------------
# consultas
# -----------------------

@app.command("animals")
def cmd_animals(
    type_id: Optional[int] = typer.Option(None, "--type-id", help="Filtra por tipo"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Lista o rebanho."""
    animals = _run(db_path, "get-animals", type_id)
    rows = [
        {
            "id": a["id"],
            "brinco": a.get("tagNumber"),
            "nome": a["name"],
            "tipo": (a.get("type") or {}).get("name"),
            "sexo": a.get("gender"),
            "raça": a.get("breed"),
            "nascimento": a.get("dateOfBirth"),
        }
        for a in animals
    ]
    _display_table(rows, title="Rebanho")


@app.command("types")
def cmd_types(db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")):
    """Tipos de animal com a contagem de animais."""
    _display_table(_run(db_path, "get-animal-type-counts"), title="Tipos de Animal")


@app.command("transactions")
def cmd_transactions(
    tipo: Optional[str] = typer.Option(None, "--type", help="income | expense"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Lançamentos do caixa (mais recentes primeiro)."""
    if tipo:
        rows = _run(db_path, "get-transactions-by-type", tipo)
    else:
        rows = _run(db_path, "get-transactions")
    _display_table(rows, title="Fluxo de Caixa", columns=["id", "date", "type", "name", "amount"])


@app.command("summary")
def cmd_summary(db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")):
    """Resumo do caixa: receitas, despesas e saldo."""
    _display_table(_run(db_path, "get-cashflow-summary"), title="Resumo do Caixa")


@app.command("milk-stats")
def cmd_milk_stats(
    animal_id: Optional[int] = typer.Option(None, "--animal-id", help="Só um animal"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Estatísticas da produção de leite."""
    _display_table(_run(db_path, "get-milk-production-stats", animal_id), title="Produção de Leite")


@app.command("events")
def cmd_events(db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")):
    """Próximos partos previstos e vermifugações."""
    rows = _run(db_path, "get-upcoming-events")
    _display_table(
        rows,
        title="Próximos Eventos",
        columns=["animal_name", "tag_number", "record_type", "date", "expected_delivery_date"],
    )


export_app = typer.Typer(help="Exporta dados para XLSX")
app.add_typer(export_app, name="export")


def _echo_export(res: Dict[str, Any]) -> None:
    if res.get("success"):
        typer.echo(f">> Planilha gerada: {res['filePath']}")
    else:
        typer.echo(res.get("message", "Failed to export"), err=True)
        raise typer.Exit(code=1)


@export_app.command("transactions")
def cmd_export_transactions(
    path: str = typer.Argument(..., help="Arquivo XLSX de destino"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Exporta os lançamentos (abas Transactions e Summary)."""
    _echo_export(_run(db_path, "export-transactions-excel", path))


@export_app.command("animals")
def cmd_export_animals(
    path: str = typer.Argument(..., help="Arquivo XLSX de destino"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Exporta o rebanho (abas Animals e Summary)."""
    _echo_export(_run(db_path, "export-animals-excel", path))


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
