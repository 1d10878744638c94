"""Main CLI application"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from minuta_drafter.cli.draft_cmd import analyze_command, draft_command
from minuta_drafter.models.document import AnalysisKind, DocumentKind, DocumentRequest
from minuta_drafter.services.prompts import get_party_roles
from minuta_drafter.utils.config import get_settings

app = typer.Typer(
    name="minuta-drafter",
    help="Rascunhador de minutas jurídicas com análise de riscos e variações de cláusulas",
    add_completion=False,
)

console = Console()


def configure_logging(level: Optional[str] = None):
    """Send log records through Rich, at the configured level"""
    level = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
):
    """Minuta Drafter"""
    configure_logging("DEBUG" if verbose else None)


@app.command("roles")
def roles():
    """Show document kinds and how their parties are labelled"""
    table = Table(title="Tipos de Documento")
    table.add_column("Tipo", style="cyan")
    table.add_column("Parte 1", style="green")
    table.add_column("Parte 2", style="green")

    for kind in DocumentKind:
        labels = get_party_roles(kind)
        table.add_row(kind.value, labels.role1_label, labels.role2_label)

    console.print(table)


@app.command("draft")
def draft(
    party1: str = typer.Option(..., "--party1", help="First party (e.g. Contratante)"),
    party2: str = typer.Option(..., "--party2", help="Second party (e.g. Contratado(a))"),
    objective: str = typer.Option(..., "--objective", "-o", help="Object / summary of the case"),
    kind: DocumentKind = typer.Option(DocumentKind.CONTRACT, "--kind", "-k", help="Document kind"),
    value: Optional[str] = typer.Option(None, "--value", help="Contract or claim value in R$"),
    analyze: Optional[AnalysisKind] = typer.Option(None, "--analyze", "-a", help="Run an analysis on the new draft"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    prompt_only: bool = typer.Option(False, "--prompt-only", help="Print the prompt without calling the model"),
):
    """Generate a legal document draft"""
    request = DocumentRequest(
        document_kind=kind,
        party1=party1,
        party2=party2,
        monetary_value=value,
        objective=objective,
    )
    draft_command(request, analysis=analyze, json_output=json_output, prompt_only=prompt_only)


@app.command("analyze")
def analyze(
    draft_file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="File holding the draft"),
    kind: AnalysisKind = typer.Option(AnalysisKind.RISKS, "--kind", "-k", help="Analysis to run"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    prompt_only: bool = typer.Option(False, "--prompt-only", help="Print the prompt without calling the model"),
):
    """Analyse an existing draft for risks or clause variations"""
    text = draft_file.read_text(encoding="utf-8")
    if not text.strip():
        console.print(f"[red]O arquivo {draft_file} está vazio.[/red]")
        raise typer.Exit(code=1)
    analyze_command(text, kind, json_output=json_output, prompt_only=prompt_only)


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind host"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port"),
):
    """Run the HTTP API"""
    import uvicorn

    from minuta_drafter.api.app import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(),
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    app()
