"""Supported AI coding assistants and where each one reads its instructions."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Literal

from jinja2 import Environment, StrictUndefined

from ironbackend.errors import UnknownToolError

CURSOR_GLOBS = ("**/*.ts", "**/*.js", "**/*.py", "**/*.java", "**/*.cs", "**/*.go")
MDC_DESCRIPTION = "IronBackend - Backend Architecture Intelligence"

_env = Environment(undefined=StrictUndefined, keep_trailing_newline=True, autoescape=False)
_env.filters["tojson_compact"] = lambda value: json.dumps(list(value), separators=(",", ":"))

MDC_TEMPLATE = _env.from_string(
    "---\n"
    "description: {{ description }}\n"
    "globs: {{ globs | tojson_compact }}\n"
    "---\n"
    "\n"
    "{{ content }}"
)


@dataclass(frozen=True)
class AIToolConfig:
    id: str
    name: str
    description: str
    output_path: str
    format: Literal["md", "mdc"] = "md"
    globs: tuple[str, ...] | None = None


AI_TOOLS: tuple[AIToolConfig, ...] = (
    AIToolConfig("claude", "Claude Code", "Anthropic Claude Code (CLI & IDE)", "CLAUDE.md"),
    AIToolConfig(
        "cursor",
        "Cursor",
        "Cursor IDE with .mdc rules",
        ".cursor/rules/ironbackend.mdc",
        format="mdc",
        globs=CURSOR_GLOBS,
    ),
    AIToolConfig("windsurf", "Windsurf", "Codeium Windsurf IDE", ".windsurfrules"),
    AIToolConfig("antigravity", "Antigravity", "Google Antigravity coding assistant", ".gemini/settings/prompts.md"),
    AIToolConfig("copilot", "GitHub Copilot", "GitHub Copilot with custom instructions", ".github/copilot-instructions.md"),
    AIToolConfig("kiro", "Kiro", "AWS Kiro IDE", ".kiro/rules.md"),
    AIToolConfig("codex", "Codex", "OpenAI Codex CLI", "AGENTS.md"),
    AIToolConfig("gemini", "Gemini CLI", "Google Gemini CLI", "GEMINI.md"),
    AIToolConfig("trae", "Trae", "Trae AI IDE", ".trae/rules.md"),
)

_BY_ID = {tool.id: tool for tool in AI_TOOLS}


def get_ai_tool(tool_id: str) -> AIToolConfig | None:
    return _BY_ID.get(tool_id)


def require_ai_tool(tool_id: str) -> AIToolConfig:
    """Like ``get_ai_tool`` but raises ``UnknownToolError`` for unknown ids."""
    tool = get_ai_tool(tool_id)
    if tool is None:
        raise UnknownToolError(tool_id, get_ai_tool_ids())
    return tool


def get_ai_tool_ids() -> list[str]:
    return [tool.id for tool in AI_TOOLS]


def format_for_ai_tool(tool: AIToolConfig, content: str) -> str:
    """Wrap ``content`` in the file format ``tool`` expects.

    ``mdc`` files get a front matter block with a description and globs;
    plain markdown is returned unchanged.
    """
    if tool.format == "mdc":
        return MDC_TEMPLATE.render(
            description=MDC_DESCRIPTION,
            globs=tool.globs or ("**/*",),
            content=content,
        )
    return content
