"""Typer CLI for ``ironbackend init``, ``select``, ``export``, ``doctor`` and friends."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ironbackend.config import (
    IRONBACKEND_DIR,
    PROMPTS_DIR,
    VERSION,
    config_path,
    ironbackend_dir,
    load_local_config,
    load_raw_config,
    new_local_config,
    prompts_dir,
    save_local_config,
    touch_config,
)
from ironbackend.errors import IronBackendError
from ironbackend.schemas.config import LocalConfig

# Load .env file from project root (if it exists)
load_dotenv()

app = typer.Typer(
    name="ironbackend",
    help="IronBackend: backend architecture intelligence for AI coding assistants.",
    no_args_is_help=True,
)
select_app = typer.Typer(help="Select an architecture style or tech stack.", no_args_is_help=True)
export_app = typer.Typer(help="Export prompts and configuration.", no_args_is_help=True)
app.add_typer(select_app, name="select")
app.add_typer(export_app, name="export")

console = Console()
logger = logging.getLogger("ironbackend")


def _setup_logging(verbose: bool) -> None:
    if verbose:
        level: int | str = logging.DEBUG
    else:
        level = os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
        force=True,
    )


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]{escape(message)}[/]")
    return typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"ironbackend {VERSION}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    """Backend architecture intelligence for AI coding assistants."""


# ── Shared helpers ───────────────────────────────────────────────────


def _choose(title: str, options: list[tuple[str, str]], *, allow_skip: bool = False) -> str | None:
    """Numbered picker. Accepts a number or an id; 0 skips when allowed."""
    console.print(f"[bold]{title}[/]")
    if allow_skip:
        console.print("  0. Skip (select later)")
    for i, (_, label) in enumerate(options, start=1):
        console.print(f"  {i}. {label}")

    ids = [option_id for option_id, _ in options]
    while True:
        answer = typer.prompt("Choice", default="0" if allow_skip else "1").strip()
        if allow_skip and answer == "0":
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return ids[int(answer) - 1]
        if answer in ids:
            return answer
        console.print(f"[yellow]Invalid choice: {answer}[/]")


def _prompt_sections(config: LocalConfig) -> dict[str, str]:
    from ironbackend.prompts.builder import PromptBuilderConfig, build_prompt_sections

    return build_prompt_sections(
        PromptBuilderConfig(
            style_id=config.style or "",
            stack_id=config.stack or "",
            rule_categories=config.rules.enabled,
            rule_overrides=dict(config.rules.overrides),
        )
    )


def _regenerate(root: Path, config: LocalConfig) -> list[Path]:
    """Rewrite the prompt files and the configured tool's file."""
    from ironbackend.output.writer import write_prompt_files, write_tool_file
    from ironbackend.tools import get_ai_tool

    with console.status("Regenerating prompts..."):
        sections = _prompt_sections(config)
        written = write_prompt_files(prompts_dir(root), sections)
        tool = get_ai_tool(config.tool) if config.tool else None
        if tool is not None:
            written.append(write_tool_file(root, tool, sections["combined"]))
    logger.debug("Regenerated %d prompt files for style=%s stack=%s", len(written), config.style, config.stack)
    return written


def _load(root: Path) -> LocalConfig:
    result = load_local_config(root)
    for step in result.applied_migrations:
        console.print(f"[cyan]Migrated config:[/] {step}")
    return result.config


# ── init ─────────────────────────────────────────────────────────────


@app.command()
def init(
    tool: Optional[str] = typer.Argument(None, help="AI tool to initialize for (e.g. claude, cursor, copilot)."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip prompts and use defaults."),
    style: Optional[str] = typer.Option(None, "--style", "-s", help="Architecture style to use."),
    stack: Optional[str] = typer.Option(None, "--stack", "-t", help="Tech stack to use."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing .ironbackend directory."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Initialize IronBackend in the current project."""
    _setup_logging(verbose)
    from ironbackend.output.writer import write_prompt_files, write_tool_file
    from ironbackend.registry.stacks import get_stack, get_stack_ids
    from ironbackend.registry.styles import get_style, get_style_ids
    from ironbackend.shared.validation import format_cli_error, sanitize_input, validate_cli_args
    from ironbackend.tools import AI_TOOLS, get_ai_tool_ids, require_ai_tool

    root = Path.cwd()
    console.print("[bold blue]IronBackend Initialization[/]\n")

    try:
        tool = sanitize_input(tool) if tool else None
        style = sanitize_input(style) if style else None
        stack = sanitize_input(stack) if stack else None
        validate_cli_args(tool_id=tool, style_id=style, stack_id=stack)
    except ValidationError as exc:
        raise _fail(format_cli_error(exc))

    if tool is None:
        if yes:
            console.print("[red]Please specify an AI tool: ironbackend init <tool>[/]")
            raise _fail(f"Available tools: {', '.join(get_ai_tool_ids())}")
        tool = _choose("Select AI tool to initialize for:", [(t.id, f"{t.name} - {t.description}") for t in AI_TOOLS])

    try:
        selected_tool = require_ai_tool(tool or "")
    except IronBackendError as exc:
        raise _fail(str(exc))

    if style is not None and get_style(style) is None:
        raise _fail(f"Unknown style: {style} (available: {', '.join(get_style_ids())})")
    if stack is not None and get_stack(stack) is None:
        raise _fail(f"Unknown stack: {stack} (available: {', '.join(get_stack_ids())})")

    console.print(f"[cyan]Initializing for: {selected_tool.name}[/]\n")

    if ironbackend_dir(root).exists() and not force:
        if yes:
            raise _fail(f"{IRONBACKEND_DIR}/ already exists. Use --force to overwrite.")
        if not typer.confirm(f"{IRONBACKEND_DIR} directory already exists. Overwrite?", default=False):
            console.print("[yellow]Initialization cancelled.[/]")
            raise typer.Exit()

    if not yes:
        if style is None:
            style = _choose(
                "Select an architecture style:",
                [(s, f"{get_style(s).name}") for s in get_style_ids()],  # type: ignore[union-attr]
                allow_skip=True,
            )
        if stack is None:
            stack = _choose(
                "Select a tech stack:",
                [(s, f"{get_stack(s).name}") for s in get_stack_ids()],  # type: ignore[union-attr]
                allow_skip=True,
            )

    try:
        with console.status("Creating IronBackend configuration..."):
            config = new_local_config(selected_tool.id, style, stack)
            prompts_dir(root).mkdir(parents=True, exist_ok=True)
            save_local_config(root, config)
            if style and stack:
                sections = _prompt_sections(config)
                write_prompt_files(prompts_dir(root), sections)
                write_tool_file(root, selected_tool, sections["combined"])
    except (IronBackendError, OSError) as exc:
        raise _fail(f"Initialization failed: {exc}")

    console.print("[green]IronBackend initialized successfully![/]\n")
    console.print(f"[green]✓[/] Created {IRONBACKEND_DIR}/{PROMPTS_DIR}/")
    console.print(f"[green]✓[/] Created {config_path(root).relative_to(root)}")
    if style and stack:
        console.print("[green]✓[/] Generated AI prompts")
        console.print(f"[green]✓[/] Created {selected_tool.output_path}")
        console.print(f"\n[bold]Next:[/] review {selected_tool.output_path} and start coding with {selected_tool.name}.")
    else:
        console.print("\n[bold]Next steps:[/]")
        console.print("  1. Select a style: ironbackend select style <name>")
        console.print("  2. Select a stack: ironbackend select stack <name>")
        console.print("  3. Export prompts: ironbackend export prompts")


# ── select ───────────────────────────────────────────────────────────


@select_app.command("style")
def select_style(
    name: Optional[str] = typer.Argument(None, help="Style id, e.g. clean-monolith."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Select an architecture style."""
    _setup_logging(verbose)
    from ironbackend.registry.styles import get_style, get_style_ids

    root = Path.cwd()
    try:
        config = _load(root)
    except IronBackendError as exc:
        raise _fail(str(exc))

    if name is None:
        name = _choose(
            "Select an architecture style:",
            [(s, f"{get_style(s).name}") for s in get_style_ids()],  # type: ignore[union-attr]
        )
    style = get_style(name or "")
    if style is None:
        console.print(f"[red]Unknown style: {name}[/]")
        console.print("[yellow]Available styles:[/]")
        for style_id in get_style_ids():
            console.print(f"  - {style_id}")
        raise typer.Exit(code=1)

    config = touch_config(config, style=style.id)
    try:
        save_local_config(root, config)
    except OSError as exc:
        raise _fail(f"Could not save config: {exc}")

    console.print(f"[green]✓ Selected style:[/] [bold]{style.name}[/]")
    console.print("[bold]Core Principles:[/]")
    for principle in style.core_principles[:3]:
        console.print(f"  • {principle}")

    if not config.stack:
        console.print("[yellow]Select a stack to generate prompts: ironbackend select stack[/]")
        return
    try:
        for path in _regenerate(root, config):
            console.print(f"  Updated: {path.relative_to(root)}")
    except (IronBackendError, OSError) as exc:
        raise _fail(f"Failed to regenerate prompts: {exc}")


@select_app.command("stack")
def select_stack(
    name: Optional[str] = typer.Argument(None, help="Stack id, e.g. python-fastapi."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Select a tech stack."""
    _setup_logging(verbose)
    from ironbackend.registry.stacks import get_stack, get_stack_ids

    root = Path.cwd()
    try:
        config = _load(root)
    except IronBackendError as exc:
        raise _fail(str(exc))

    if name is None:
        name = _choose(
            "Select a tech stack:",
            [(s, f"{get_stack(s).name}") for s in get_stack_ids()],  # type: ignore[union-attr]
        )
    stack = get_stack(name or "")
    if stack is None:
        console.print(f"[red]Unknown stack: {name}[/]")
        console.print("[yellow]Available stacks:[/]")
        for stack_id in get_stack_ids():
            console.print(f"  - {stack_id}")
        raise typer.Exit(code=1)

    config = touch_config(config, stack=stack.id)
    try:
        save_local_config(root, config)
    except OSError as exc:
        raise _fail(f"Could not save config: {exc}")

    console.print(f"[green]✓ Selected stack:[/] [bold]{stack.name}[/]")
    console.print("[bold]Stack Details:[/]")
    console.print(f"  • Language: {stack.language} {stack.language_version}")
    console.print(f"  • Framework: {stack.framework} {stack.framework_version}")
    console.print(f"  • Database: {stack.database.type} + {stack.database.orm}")

    if not config.style:
        console.print("[yellow]Select a style to generate prompts: ironbackend select style[/]")
        return
    try:
        for path in _regenerate(root, config):
            console.print(f"  Updated: {path.relative_to(root)}")
    except (IronBackendError, OSError) as exc:
        raise _fail(f"Failed to regenerate prompts: {exc}")


# ── export ───────────────────────────────────────────────────────────


@export_app.command("prompts")
def export_prompts_cmd(
    output: str = typer.Option(f"{IRONBACKEND_DIR}/{PROMPTS_DIR}", "--output", "-o", help="Output directory."),
    fmt: str = typer.Option("all", "--format", "-f", help="Output format: all, markdown, cursor, claude."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Export AI prompt files."""
    _setup_logging(verbose)
    from ironbackend.output.writer import EXPORT_FORMATS, export_prompts
    from ironbackend.registry.stacks import get_stack
    from ironbackend.registry.styles import get_style
    from ironbackend.shared.validation import sanitize_file_path

    root = Path.cwd().resolve()
    if fmt not in EXPORT_FORMATS:
        raise _fail(f"Unknown format: {fmt} (expected one of {', '.join(EXPORT_FORMATS)})")

    try:
        config = _load(root)
        output_dir = sanitize_file_path(output, root)
    except IronBackendError as exc:
        raise _fail(str(exc))

    if not config.style or not config.stack:
        console.print("[red]Style and stack must be selected before exporting.[/]")
        console.print("[yellow]Run: ironbackend select style <name>[/]")
        console.print("[yellow]Run: ironbackend select stack <name>[/]")
        raise typer.Exit(code=1)

    try:
        with console.status("Generating prompts..."):
            sections = _prompt_sections(config)
            written = export_prompts(
                root,
                output_dir,
                sections,
                get_style(config.style),  # type: ignore[arg-type]
                get_stack(config.stack),  # type: ignore[arg-type]
                fmt,
            )
    except (IronBackendError, OSError) as exc:
        raise _fail(f"Export failed: {exc}")

    console.print("[green]Prompts exported successfully![/]\n")
    console.print("[bold]Exported files:[/]")
    for path in written:
        size_kb = path.stat().st_size / 1024
        console.print(f"  {path.relative_to(root)} ({size_kb:.1f} KB)")


@export_app.command("config")
def export_config_cmd(
    output: str = typer.Option("ironbackend.config.json", "--output", "-o", help="Output file."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Export the current configuration as a shareable file."""
    _setup_logging(verbose)
    from ironbackend.output.writer import export_config
    from ironbackend.shared.validation import sanitize_file_path

    root = Path.cwd()
    try:
        config = _load(root)
        path = export_config(config, sanitize_file_path(output, root))
    except (IronBackendError, OSError) as exc:
        raise _fail(str(exc))
    console.print(f"[green]✓ Configuration exported to:[/] {path}")


# ── doctor ───────────────────────────────────────────────────────────


@dataclass
class DoctorCheck:
    name: str
    status: str  # pass | warn | fail
    message: str


def _parse_timestamp(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def run_checks(root: Path) -> list[DoctorCheck]:
    """Inspect the project setup without modifying anything."""
    from ironbackend.migrations import compare_versions, get_latest_version, migrate_config
    from ironbackend.registry.stacks import get_stack, get_stack_ids
    from ironbackend.registry.styles import get_style, get_style_ids
    from ironbackend.tools import require_ai_tool

    checks: list[DoctorCheck] = []

    if ironbackend_dir(root).is_dir():
        checks.append(DoctorCheck("Configuration directory", "pass", f"{IRONBACKEND_DIR}/ directory exists"))
    else:
        checks.append(
            DoctorCheck("Configuration directory", "fail", f"{IRONBACKEND_DIR}/ directory not found. Run: ironbackend init")
        )

    try:
        raw = load_raw_config(root)
    except IronBackendError as exc:
        checks.append(DoctorCheck("Configuration file", "fail", str(exc)))
        return checks
    checks.append(DoctorCheck("Configuration file", "pass", "config.json is valid JSON"))

    try:
        config = migrate_config(raw).config
    except IronBackendError as exc:
        checks.append(DoctorCheck("Configuration schema", "fail", str(exc)))
        return checks
    checks.append(DoctorCheck("Configuration schema", "pass", "config.json matches the schema"))

    latest = get_latest_version()
    version = raw["version"]
    if compare_versions(version, latest) == 0:
        checks.append(DoctorCheck("Version", "pass", f"Version {version} is current"))
    elif compare_versions(version, latest) < 0:
        checks.append(
            DoctorCheck("Version", "warn", f"Config version {version} is older than {latest}. Run: ironbackend migrate")
        )
    else:
        checks.append(DoctorCheck("Version", "warn", f"Config version {version} is newer than this CLI ({latest})"))

    if config.style:
        style = get_style(config.style)
        if style:
            checks.append(DoctorCheck("Architecture style", "pass", f'Style "{style.name}" is valid'))
        else:
            checks.append(
                DoctorCheck(
                    "Architecture style",
                    "fail",
                    f"Unknown style: {config.style}. Available: {', '.join(get_style_ids())}",
                )
            )
    else:
        checks.append(DoctorCheck("Architecture style", "warn", "No style selected. Run: ironbackend select style <name>"))

    if config.stack:
        stack = get_stack(config.stack)
        if stack:
            checks.append(DoctorCheck("Tech stack", "pass", f'Stack "{stack.name}" is valid'))
        else:
            checks.append(
                DoctorCheck(
                    "Tech stack",
                    "fail",
                    f"Unknown stack: {config.stack}. Available: {', '.join(get_stack_ids())}",
                )
            )
    else:
        checks.append(DoctorCheck("Tech stack", "warn", "No stack selected. Run: ironbackend select stack <name>"))

    prompts = prompts_dir(root)
    prompt_files = sorted(prompts.iterdir()) if prompts.is_dir() else []
    if prompt_files:
        checks.append(DoctorCheck("Prompt files", "pass", f"{len(prompt_files)} prompt files generated"))
    elif prompts.is_dir():
        checks.append(DoctorCheck("Prompt files", "warn", "Prompts directory is empty. Run: ironbackend export prompts"))
    else:
        checks.append(DoctorCheck("Prompt files", "warn", "Prompts directory not found"))

    cursor_rules = root / require_ai_tool("cursor").output_path
    if cursor_rules.exists():
        checks.append(DoctorCheck("Cursor integration", "pass", ".cursor/rules/ironbackend.mdc exists"))
    else:
        checks.append(DoctorCheck("Cursor integration", "warn", "Cursor rules not found. Run: ironbackend export prompts"))

    system_prompt = prompts / "system-prompt.md"
    if config.style and config.stack and config.updated_at and system_prompt.exists():
        updated = _parse_timestamp(config.updated_at)
        if updated is None:
            checks.append(DoctorCheck("Prompt freshness", "warn", f"Cannot parse updatedAt: {config.updated_at}"))
        else:
            if updated.tzinfo is None:
                updated = updated.astimezone()
            generated = datetime.fromtimestamp(system_prompt.stat().st_mtime, tz=timezone.utc)
            if generated >= updated:
                checks.append(DoctorCheck("Prompt freshness", "pass", "Prompts are up to date"))
            else:
                checks.append(
                    DoctorCheck("Prompt freshness", "warn", "Prompts may be outdated. Run: ironbackend export prompts")
                )

    return checks


_STATUS_STYLE = {"pass": ("✓", "green"), "warn": ("⚠", "yellow"), "fail": ("✗", "red")}


@app.command()
def doctor(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show details for passing checks too."),
) -> None:
    """Validate the IronBackend setup and report problems."""
    _setup_logging(verbose)
    console.print("[bold blue]IronBackend Doctor[/]\n")

    checks = run_checks(Path.cwd())
    for check in checks:
        icon, color = _STATUS_STYLE[check.status]
        console.print(f"[{color}]  {icon} {check.name}[/]")
        if verbose or check.status != "pass":
            console.print(f"    {check.message}", style="dim", markup=False)

    counts = {status: sum(1 for c in checks if c.status == status) for status in _STATUS_STYLE}
    console.print("\n[bold]Summary:[/]")
    console.print(f"[green]  ✓ {counts['pass']} passed[/]")
    if counts["warn"]:
        console.print(f"[yellow]  ⚠ {counts['warn']} warnings[/]")
    if counts["fail"]:
        console.print(f"[red]  ✗ {counts['fail']} failed[/]")
        console.print("[red]Some checks failed. Fix the issues above.[/]")
        raise typer.Exit(code=1)
    if counts["warn"]:
        console.print("[yellow]Some warnings found. Consider addressing them.[/]")
    else:
        console.print("[green]All checks passed![/]")


# ── list / info / migrate ────────────────────────────────────────────


@app.command("list")
def list_cmd(
    styles: bool = typer.Option(False, "--styles", "-s", help="List architecture styles only."),
    stacks: bool = typer.Option(False, "--stacks", "-t", help="List tech stacks only."),
) -> None:
    """List available architecture styles and tech stacks."""
    from ironbackend.registry.loader import default_registry

    registry = default_registry()
    if not stacks:
        console.print("[bold blue]Architecture Styles:[/]\n")
        for style in registry.styles.values():
            console.print(f"  [bold]{style.id}[/]")
            console.print(f"    {style.name} - {style.description[:60]}...", style="dim", markup=False)
    if not styles:
        console.print("\n[bold blue]Tech Stacks:[/]\n")
        for stack in registry.stacks.values():
            console.print(f"  [bold]{stack.id}[/]")
            console.print(f"    {stack.name}", style="dim", markup=False)


@app.command()
def info() -> None:
    """Show the current project configuration."""
    from ironbackend.registry.stacks import get_stack
    from ironbackend.registry.styles import get_style

    try:
        config = load_local_config(Path.cwd(), write_back=False).config
    except IronBackendError as exc:
        raise _fail(str(exc))

    console.print("[bold blue]Current Configuration[/]\n")
    console.print(f"  [bold]Version:[/] {config.version}")
    console.print(f"  [bold]Tool:[/] {escape(config.tool) if config.tool else '[yellow]Not selected[/]'}")

    if config.style:
        style = get_style(config.style)
        console.print(f"  [bold]Style:[/] {escape(style.name) if style else f'[red]{escape(config.style)}[/]'}")
    else:
        console.print("  [bold]Style:[/] [yellow]Not selected[/]")

    if config.stack:
        stack = get_stack(config.stack)
        console.print(f"  [bold]Stack:[/] {escape(stack.name) if stack else f'[red]{escape(config.stack)}[/]'}")
    else:
        console.print("  [bold]Stack:[/] [yellow]Not selected[/]")

    console.print(f"  [bold]Rules:[/] {len(config.rules.enabled)} categories enabled")
    console.print(f"  [bold]Updated:[/] {escape(config.updated_at or 'Unknown')}")


@app.command()
def migrate(
    dry_run: bool = typer.Option(False, "--dry-run", help="Show the migrations without writing the config."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Upgrade .ironbackend/config.json to the latest version."""
    _setup_logging(verbose)
    from ironbackend.migrations import get_latest_version, migrate_config, needs_migration

    root = Path.cwd()
    try:
        raw = load_raw_config(root)
        if not needs_migration(raw):
            migrate_config(raw)
            console.print(f"[green]Config is up to date[/] (version {raw['version']})")
            return
        result = migrate_config(raw)
    except IronBackendError as exc:
        raise _fail(str(exc))

    latest = get_latest_version()
    for step in result.applied_migrations:
        console.print(f"  {step}")
    if dry_run:
        console.print(f"[yellow]Dry run:[/] would upgrade {raw['version']} → {latest}")
        return

    try:
        save_local_config(root, result.config)
    except OSError as exc:
        raise _fail(f"Could not save config: {exc}")
    console.print(f"[green]Migrated config to version {result.config.version}[/]")
