"""Persists rendered prompts for the project and AI tools."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ironbackend.schemas.config import LocalConfig
from ironbackend.schemas.registry import ArchitectureStyle, TechStack
from ironbackend.shared.clock import utc_timestamp
from ironbackend.tools import AIToolConfig, format_for_ai_tool, require_ai_tool

logger = logging.getLogger(__name__)

EXPORT_FORMATS: tuple[str, ...] = ("all", "markdown", "cursor", "claude")

CONFIG_SCHEMA_URL = "https://ironbackend.dev/schema/config.json"

PROMPT_FILES = {
    "system-prompt.md": "combined",
    "style.md": "style",
    "stack.md": "stack",
    "rules.md": "rules",
}


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.debug("Wrote %s (%d bytes)", path, len(content))
    return path


def write_prompt_files(directory: str | Path, sections: dict[str, str]) -> list[Path]:
    """Write system-prompt.md, style.md, stack.md and rules.md into ``directory``."""
    directory = Path(directory)
    return [_write(directory / name, sections[key]) for name, key in PROMPT_FILES.items()]


def write_tool_file(root: str | Path, tool: AIToolConfig, combined: str) -> Path:
    """Write the combined prompt to the file ``tool`` reads, in its format."""
    return _write(Path(root) / tool.output_path, format_for_ai_tool(tool, combined))


def render_claude_project(combined: str) -> str:
    return (
        "# Claude Project Prompt - IronBackend\n\n"
        f"{combined}\n\n"
        "---\n\n"
        "## How to Use\n\n"
        "Copy this entire prompt to your Claude project's custom instructions "
        "or include it at the start of your conversation."
    )


def render_copilot_instructions(style: ArchitectureStyle, stack: TechStack, sections: dict[str, str]) -> str:
    return (
        "# GitHub Copilot Custom Instructions\n\n"
        f"## Architecture: {style.name}\n"
        f"## Stack: {stack.name}\n\n"
        f"{sections['style']}\n\n"
        "---\n\n"
        f"{sections['rules']}"
    )


def export_prompts(
    root: str | Path,
    output_dir: str | Path,
    sections: dict[str, str],
    style: ArchitectureStyle,
    stack: TechStack,
    fmt: str = "all",
) -> list[Path]:
    """Write the export bundle for ``fmt`` and return every file written.

    ``all`` writes the markdown set, the Cursor rules (into ``output_dir``
    and ``.cursor/rules/``), the Claude project prompt and Copilot
    instructions.
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unknown export format: {fmt} (expected one of {', '.join(EXPORT_FORMATS)})")

    root = Path(root)
    output_dir = Path(output_dir)
    written: list[Path] = []

    if fmt in ("all", "markdown"):
        written.extend(write_prompt_files(output_dir, sections))

    if fmt in ("all", "cursor"):
        cursor = require_ai_tool("cursor")
        written.append(write_tool_file(root, cursor, sections["combined"]))
        written.append(_write(output_dir / "cursor-rules.mdc", format_for_ai_tool(cursor, sections["combined"])))

    if fmt in ("all", "claude"):
        written.append(_write(output_dir / "claude-project.md", render_claude_project(sections["combined"])))

    if fmt == "all":
        written.append(
            _write(output_dir / "copilot-instructions.md", render_copilot_instructions(style, stack, sections))
        )

    logger.info("Exported %d prompt files (format=%s)", len(written), fmt)
    return written


def export_config(config: LocalConfig, output: str | Path) -> Path:
    """Write a shareable copy of ``config`` with a schema URL and export stamp."""
    payload = {
        "$schema": CONFIG_SCHEMA_URL,
        "version": config.version,
        "style": config.style,
        "stack": config.stack,
        "rules": config.rules.model_dump(),
        "exportedAt": utc_timestamp(),
    }
    return _write(Path(output), json.dumps(payload, indent=2) + "\n")
