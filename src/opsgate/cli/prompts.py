"""User confirmation dialogs."""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Prompt

from opsgate.exceptions import UserCancelledError
from opsgate.models.decision import ExecutionDecision, ExecutionResult

console = Console()


def ask_confirmation_phrase(decision: ExecutionDecision) -> str:
    """Ask the operator to type the phrase the decision's risk level requires.

    Raises UserCancelledError when the operator types ``cancel`` or nothing.
    """
    risk = decision.report.risk_level.name if decision.report else "UNKNOWN"
    console.print(
        f"\n[bold yellow]{decision.skill_name} is {risk} risk in "
        f"{decision.environment} and requires confirmation.[/]"
    )
    if decision.interpolated_command:
        console.print(f"  Command: [dim]{decision.interpolated_command}[/]")

    answer = Prompt.ask(decision.reason or "Confirm", default="cancel").strip()
    if not answer or answer.lower() == "cancel":
        raise UserCancelledError(f"Execution of {decision.skill_name} cancelled")
    return answer


def display_dry_run(result: ExecutionResult) -> None:
    console.print("\n[bold cyan]DRY RUN — nothing will be executed:[/]\n")
    console.print(f"  Command: [dim]{result.command}[/]")
    if result.message:
        console.print(f"  {result.message}")
