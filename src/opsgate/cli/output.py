"""Rich display helpers for CLI output."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from opsgate.models.decision import ExecutionDecision, ExecutionResult, GateState
from opsgate.models.policy import EnforcementLevel, EvaluationResult, Policy
from opsgate.models.rbac import User
from opsgate.models.risk import RiskLevel
from opsgate.models.safety import SafetyReport
from opsgate.models.skill import Skill

console = Console()

RISK_STYLES = {
    RiskLevel.LOW: "green",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.HIGH: "red",
    RiskLevel.CRITICAL: "bold red",
}

STATE_STYLES = {
    GateState.DENIED: ("red", "DENIED"),
    GateState.AWAITING_CONFIRMATION: ("yellow", "AWAITING CONFIRMATION"),
    GateState.DRY_RUN: ("cyan", "DRY RUN"),
    GateState.ADMITTED: ("green", "ADMITTED"),
}


def _risk(level: RiskLevel) -> str:
    style = RISK_STYLES.get(level, "white")
    return f"[{style}]{level.name}[/]"


def print_policy_result(result: EvaluationResult) -> None:
    if not result.violations and not result.warnings:
        console.print("[green]All policies passed.[/]")
        return

    table = Table(title="Policy Results", expand=True)
    table.add_column("Policy", style="cyan")
    table.add_column("Severity", justify="center")
    table.add_column("Effect", justify="center")
    table.add_column("Reason")

    for v in result.violations:
        table.add_row(v.policy_name, v.severity.value, "[red]DENY[/]", v.reason)
    for v in result.warnings:
        table.add_row(v.policy_name, v.severity.value, "[yellow]WARN[/]", v.reason)

    console.print(table)


def print_safety_report(report: SafetyReport) -> None:
    table = Table(title="Safety Report", show_header=False, expand=True)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Risk", _risk(report.risk_level))
    table.add_row("Blast Radius", str(report.blast_radius))
    if report.affected_resources:
        table.add_row("Resources", ", ".join(report.affected_resources))
    table.add_row("Rollback", report.rollback_procedure if report.rollback_available else "not available")
    table.add_row("Dry Run Recommended", "yes" if report.dry_run_recommended else "no")
    if report.requires_confirmation:
        table.add_row("Confirmation", report.confirmation_prompt or "required")
    console.print(table)

    if report.environment_warning:
        console.print(f"[bold red]{report.environment_warning}[/]")


def print_decision(decision: ExecutionDecision) -> None:
    print_policy_result(decision.policy_result)
    if decision.report is not None:
        print_safety_report(decision.report)

    style, label = STATE_STYLES[decision.state]
    body = f"[{style}]{label}[/]"
    if decision.reason:
        body += f"\n{decision.reason}"
    if decision.interpolated_command:
        body += f"\n\nCommand: [dim]{decision.interpolated_command}[/]"
    console.print(
        Panel(body, title=f"{decision.skill_name} @ {decision.environment}", border_style=style)
    )


def print_result(result: ExecutionResult) -> None:
    table = Table(title="Execution Result", show_header=False, expand=True)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    status = "[green]OK[/]" if result.success else "[red]FAIL[/]"
    table.add_row("Status", f"{status} ({result.status.value})")
    table.add_row("Command", result.command)
    if result.exit_code is not None:
        table.add_row("Exit Code", str(result.exit_code))
    table.add_row("Duration", f"{result.duration:.2f}s")
    if result.stdout:
        table.add_row("Output", result.stdout)
    if result.stderr:
        table.add_row("Error", result.stderr)
    if result.message and not result.success:
        table.add_row("Message", result.message)
    console.print(table)


def print_skills(skills: list[Skill]) -> None:
    table = Table(title="Skills", expand=True)
    table.add_column("Name", style="cyan")
    table.add_column("Provider")
    table.add_column("Category")
    table.add_column("Risk", justify="center")
    table.add_column("Description")

    for skill in skills:
        table.add_row(
            skill.name, skill.provider, skill.category, _risk(skill.risk_level), skill.description
        )

    console.print(table)


def print_skill_info(skill: Skill) -> None:
    table = Table(title=skill.name, show_header=False, expand=True)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Description", skill.description)
    table.add_row("Provider", skill.provider)
    table.add_row("Category", skill.category)
    table.add_row("Risk", _risk(skill.risk_level))
    table.add_row("Confirmation", "required" if skill.requires_confirmation else "by risk")
    table.add_row("Execution", f"{skill.execution.type.value}: {skill.execution.command}")
    table.add_row("Timeout", f"{skill.execution.timeout:.0f}s")
    if skill.rollback.supported:
        table.add_row("Rollback", skill.rollback.procedure)
    console.print(table)

    if skill.inputs:
        inputs = Table(title="Inputs", expand=True)
        inputs.add_column("Name", style="cyan")
        inputs.add_column("Type")
        inputs.add_column("Required", justify="center")
        inputs.add_column("Description")
        for i in skill.inputs:
            inputs.add_row(i.name, i.type, "yes" if i.required else "", i.description)
        console.print(inputs)


def print_policies(policies: list[Policy], mode: EnforcementLevel) -> None:
    table = Table(title=f"Policies (mode: {mode.value})", expand=True)
    table.add_column("Name", style="cyan")
    table.add_column("Severity", justify="center")
    table.add_column("Declared", justify="center")
    table.add_column("Applies To")
    table.add_column("Description")

    for p in policies:
        table.add_row(
            p.name,
            p.severity.value,
            p.enforcement.value,
            ", ".join(p.applies_to) or "*",
            p.description,
        )

    console.print(table)


def print_users(users: list[User], enabled: bool) -> None:
    state = "[green]enabled[/]" if enabled else "[yellow]disabled[/]"
    console.print(f"RBAC: {state}")
    if not users:
        print_info("No users configured.")
        return

    table = Table(title="Users", expand=True)
    table.add_column("Username", style="cyan")
    table.add_column("Role")
    table.add_column("Teams")
    for u in users:
        table.add_row(u.username, u.role.value, ", ".join(u.teams))
    console.print(table)


def print_error(message: str) -> None:
    console.print(Panel(f"[red]{message}[/]", title="Error", border_style="red"))


def print_info(message: str) -> None:
    console.print(f"[dim]{message}[/]")


def print_history(rows: list[dict]) -> None:
    table = Table(title="Decision History", expand=True)
    table.add_column("Time")
    table.add_column("Skill", style="cyan")
    table.add_column("Env")
    table.add_column("User")
    table.add_column("Risk", justify="center")
    table.add_column("Decision", justify="center")
    table.add_column("Execution", justify="center")

    for row in rows:
        risk = row.get("risk_level")
        table.add_row(
            str(row.get("created_at", "")),
            row.get("skill_name", ""),
            row.get("environment", ""),
            row.get("username", "") or "",
            _risk(RiskLevel(risk)) if risk is not None else "",
            row.get("state", ""),
            row.get("execution_status") or "",
        )

    console.print(table)


def print_config(values: dict[str, Any]) -> None:
    table = Table(title="Configuration", show_header=False)
    table.add_column("Setting", style="bold cyan")
    table.add_column("Value")
    for k, v in values.items():
        table.add_row(k, str(v))
    console.print(table)
