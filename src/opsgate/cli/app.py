"""Typer CLI commands."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import typer
from rich.console import Console

from opsgate.cli.output import (
    print_config,
    print_decision,
    print_error,
    print_history,
    print_info,
    print_policies,
    print_policy_result,
    print_result,
    print_safety_report,
    print_skill_info,
    print_skills,
    print_users,
)
from opsgate.catalog.registry import apply_defaults
from opsgate.cli.prompts import ask_confirmation_phrase, display_dry_run
from opsgate.exceptions import InvalidInputError, OpsGateError, UserCancelledError
from opsgate.gate import CONFIRMED_PARAM, FORCE_PARAM
from opsgate.models.decision import ExecutionStatus, GateState

console = Console()
app = typer.Typer(name="opsgate", help="Guardrailed execution of infrastructure skills.")
skills_app = typer.Typer(help="Browse the skill catalog.")
policy_app = typer.Typer(help="Inspect and dry-check guardrail policies.")
rbac_app = typer.Typer(help="Inspect role-based access control.")
app.add_typer(skills_app, name="skills")
app.add_typer(policy_app, name="policy")
app.add_typer(rbac_app, name="rbac")


def _get_pipeline(dry_run: bool = False):
    from opsgate.config.settings import Settings
    from opsgate.main import build_pipeline, configure_logging

    settings = Settings()  # type: ignore[call-arg]
    configure_logging(settings.log_level)
    return build_pipeline(dry_run=dry_run, settings=settings)


def _coerce(value: str) -> Any:
    if value.isdigit():
        return int(value)
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.startswith(("{", "[")):
        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"Invalid JSON value: {value}", field="param") from exc
    return value


def parse_params(pairs: list[str]) -> dict[str, Any]:
    """Turn ``key=value`` pairs into a parameter map."""
    params: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise InvalidInputError(f"Expected key=value, got '{pair}'", field="param")
        params[key] = _coerce(value.strip())
    return params


@app.command()
def run(
    skill: str = typer.Argument(..., help="Skill name, e.g. k8s.deploy"),
    env: Optional[str] = typer.Option(None, "--env", "-e", help="Target environment"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Caller for RBAC checks"),
    param: list[str] = typer.Option([], "--param", "-p", help="Skill parameter as key=value"),
    confirm: Optional[str] = typer.Option(None, "--confirm", help="Confirmation phrase"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Confirm without typing the phrase"),
    force: bool = typer.Option(False, "--force", help="Execute even when a dry run is recommended"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate without executing"),
) -> None:
    """Gate a skill through policy, safety and RBAC checks, then execute it."""
    try:
        params = parse_params(param)
    except InvalidInputError as exc:
        print_error(str(exc))
        raise typer.Exit(1)

    if confirm:
        params[CONFIRMED_PARAM] = confirm
    elif yes:
        params[CONFIRMED_PARAM] = True
    if force:
        params[FORCE_PARAM] = True

    async def _run() -> int:
        pipeline = _get_pipeline(dry_run=dry_run)
        await pipeline.store.initialize()
        try:
            decision, result = await pipeline.run(skill, params, env=env, username=user)

            if decision.state == GateState.AWAITING_CONFIRMATION and CONFIRMED_PARAM not in params:
                print_decision(decision)
                params[CONFIRMED_PARAM] = ask_confirmation_phrase(decision)
                decision, result = await pipeline.run(skill, params, env=env, username=user)

            print_decision(decision)
            if result is not None:
                if result.status == ExecutionStatus.DRY_RUN:
                    display_dry_run(result)
                else:
                    print_result(result)

            if decision.state in (GateState.DENIED, GateState.AWAITING_CONFIRMATION):
                return 1
            return 0 if result is None or result.success else 1
        except UserCancelledError as exc:
            print_info(str(exc))
            return 1
        except OpsGateError as exc:
            print_error(str(exc))
            return 1
        finally:
            await pipeline.store.close()

    code = asyncio.run(_run())
    if code:
        raise typer.Exit(code)


@skills_app.command("list")
def skills_list(
    provider: Optional[str] = typer.Option(None, "--provider", help="Filter by provider"),
) -> None:
    """List catalogued skills."""
    skills = _get_pipeline().catalog.list(provider=provider)
    if not skills:
        print_info("No skills found.")
    else:
        print_skills(skills)


@skills_app.command("info")
def skills_info(name: str = typer.Argument(..., help="Skill name")) -> None:
    """Show a skill's inputs, risk and execution template."""
    try:
        skill = _get_pipeline().catalog.get(name)
    except OpsGateError as exc:
        print_error(str(exc))
        raise typer.Exit(1)
    print_skill_info(skill)


@skills_app.command("search")
def skills_search(query: str = typer.Argument(..., help="Text to search for")) -> None:
    """Search skills by name, description or category."""
    skills = _get_pipeline().catalog.search(query)
    if not skills:
        print_info(f"No skills match '{query}'.")
    else:
        print_skills(skills)


@policy_app.command("list")
def policy_list() -> None:
    """List loaded policies."""
    engine = _get_pipeline().gate.policy_engine
    print_policies(engine.list_policies(), engine.enforcement_mode)


@policy_app.command("check")
def policy_check(
    skill: str = typer.Argument(..., help="Skill name"),
    env: Optional[str] = typer.Option(None, "--env", "-e", help="Target environment"),
    param: list[str] = typer.Option([], "--param", "-p", help="Skill parameter as key=value"),
) -> None:
    """Evaluate policies and safety for a skill without executing it."""
    pipeline = _get_pipeline()
    try:
        target = pipeline.catalog.get(skill)
        params = apply_defaults(target, parse_params(param))
    except OpsGateError as exc:
        print_error(str(exc))
        raise typer.Exit(1)

    env = env or pipeline.default_environment
    result = pipeline.gate.policy_engine.evaluate(target, params, env)
    print_policy_result(result)
    print_safety_report(pipeline.gate.safety.evaluate(target, params, env))
    if result.denied:
        raise typer.Exit(1)


@rbac_app.command("show")
def rbac_show() -> None:
    """Show configured users and whether RBAC is enforced."""
    authorization = _get_pipeline().gate.authorization
    print_users(authorization.list_users(), authorization.enabled)


@rbac_app.command("check")
def rbac_check(
    username: str = typer.Argument(..., help="User to check"),
    skill: str = typer.Argument(..., help="Skill name"),
    env: Optional[str] = typer.Option(None, "--env", "-e", help="Target environment"),
) -> None:
    """Check whether a user may execute a skill in an environment."""
    pipeline = _get_pipeline()
    try:
        target = pipeline.catalog.get(skill)
    except OpsGateError as exc:
        print_error(str(exc))
        raise typer.Exit(1)

    env = env or pipeline.default_environment
    authorization = pipeline.gate.authorization
    report = pipeline.gate.safety.evaluate(target, {}, env)
    allowed, reason = authorization.can_execute(
        username, target, env, risk_level=report.risk_level
    )

    if allowed:
        console.print(f"[green]ALLOWED[/] {username} may run {skill} in {env} ({report.risk_level.name})")
    else:
        console.print(f"[red]DENIED[/] {reason}")
    console.print(f"Can approve: {'yes' if authorization.can_approve(username) else 'no'}")
    if not allowed:
        raise typer.Exit(1)


@app.command()
def history(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of records"),
) -> None:
    """Show recent gate decisions."""
    async def _run():
        pipeline = _get_pipeline()
        await pipeline.store.initialize()
        try:
            rows = await pipeline.store.get_history(limit=limit)
            if not rows:
                print_info("No history found.")
            else:
                print_history(rows)
        finally:
            await pipeline.store.close()

    asyncio.run(_run())


@app.command(name="config")
def show_config() -> None:
    """Show current configuration."""
    from opsgate.config.settings import Settings

    try:
        settings = Settings()  # type: ignore[call-arg]
    except Exception as exc:
        print_error(f"Failed to load settings: {exc}")
        raise typer.Exit(1)

    print_config({
        "Enforcement Mode": settings.enforcement_mode.value,
        "Enabled Policies": ", ".join(settings.enabled_policies) or "all",
        "RBAC Enabled": settings.rbac_enabled,
        "Users": len(settings.users),
        "Dry Run": settings.dry_run,
        "Strict Confirmation": settings.strict_confirmation,
        "Default Environment": settings.default_environment,
        "Command Timeout": settings.command_timeout or "per skill",
        "DB Path": settings.db_path,
        "Log Level": settings.log_level,
    })
