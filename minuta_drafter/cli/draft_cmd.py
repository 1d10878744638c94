"""Draft and analyze command implementations"""

import asyncio
import json
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from minuta_drafter.models.document import AnalysisKind, DocumentRequest
from minuta_drafter.models.session import SessionState
from minuta_drafter.services.drafting import DraftingService
from minuta_drafter.services.prompts import PromptSpec, build_analysis_prompt, build_draft_prompt

console = Console()


def draft_command(
    request: DocumentRequest,
    analysis: Optional[AnalysisKind] = None,
    json_output: bool = False,
    prompt_only: bool = False,
    service: Optional[DraftingService] = None,
):
    """Generate a draft and optionally analyse it right away"""
    if prompt_only:
        _print_prompt(build_draft_prompt(request), json_output)
        return

    service = service or DraftingService()

    async def run():
        await service.generate_draft(request)
        if analysis and service.state.draft:
            await service.analyze(analysis)
        return service.state

    if not json_output:
        console.print("[blue]Gerando minuta...[/blue]")
    state = asyncio.run(run())
    _print_state(state, json_output)


def analyze_command(
    draft: str,
    analysis: AnalysisKind,
    json_output: bool = False,
    prompt_only: bool = False,
    service: Optional[DraftingService] = None,
):
    """Analyse an existing draft"""
    if prompt_only:
        _print_prompt(build_analysis_prompt(analysis, draft), json_output)
        return

    service = service or DraftingService(state=SessionState(draft=draft))

    if not json_output:
        console.print("[blue]Analisando...[/blue]")
    state = asyncio.run(service.analyze(analysis))
    _print_state(state, json_output)


def _print_prompt(spec: PromptSpec, json_output: bool):
    if json_output:
        print(json.dumps(spec.model_dump(), ensure_ascii=False, indent=2))
        return
    console.print(Panel(spec.system_instruction, title="Instrução de sistema", border_style="cyan"))
    console.print(Panel(spec.prompt, title="Prompt", border_style="blue"))


def _print_state(state: SessionState, json_output: bool):
    if json_output:
        output = {
            "draft": state.draft,
            "analysis": state.analysis.model_dump(mode="json") if state.analysis else None,
            "error": state.error,
        }
        print(json.dumps(output, ensure_ascii=False, indent=2))
    else:
        if state.draft:
            console.print(Panel(Markdown(state.draft), title="Minuta Gerada", border_style="green"))
        if state.analysis:
            console.print(Panel(Markdown(state.analysis.content), title=state.analysis.title, border_style="magenta"))
        if state.error:
            console.print(f"[red]{state.error}[/red]")

    if state.error:
        raise typer.Exit(code=1)
