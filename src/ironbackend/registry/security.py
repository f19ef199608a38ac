"""Security playbook accessors and its prompt section."""

from __future__ import annotations

from ironbackend.registry.loader import Registry, default_registry
from ironbackend.schemas.registry import AuthConfig, SecurityPlaybook


def security_playbook(registry: Registry | None = None) -> SecurityPlaybook:
    registry = registry or default_registry()
    return registry.security


def auth_strategies(registry: Registry | None = None) -> list[AuthConfig]:
    return list(security_playbook(registry).authentication)


def get_auth_strategy(strategy: str, registry: Registry | None = None) -> AuthConfig | None:
    for auth in auth_strategies(registry):
        if auth.strategy == strategy:
            return auth
    return None


def format_security_for_prompt(registry: Registry | None = None) -> str:
    """Render authentication, rate limiting, retry and failure guidance as markdown."""
    playbook = security_playbook(registry)
    sections: list[str] = []

    sections.append("## Authentication")
    for auth in playbook.authentication:
        sections.append("")
        sections.append(f"### {auth.strategy}")
        sections.append(f"Use when: {', '.join(auth.use_when)}")
        sections.append("Implementation:")
        for item in auth.implementation:
            sections.append(f"- {item}")
    sections.append("")

    limits = playbook.rate_limiting
    sections.append("## Rate Limiting")
    sections.append(f"- Window: {limits.window_type}")
    sections.append(f"- Default: {limits.default_limit}")
    sections.append(f"- Anonymous: {limits.anonymous_limit}")
    sections.append(f"- Response: HTTP {limits.response_code} with Retry-After header")
    sections.append("")

    retry = playbook.retry_strategy
    sections.append("## Retry Strategy")
    sections.append(f"- Base delay: {retry.base_delay}")
    sections.append(f"- Multiplier: {retry.multiplier}x")
    sections.append(f"- Max retries: {retry.max_retries}")
    sections.append(f"- Retry on: {', '.join(str(c) for c in retry.retry_on)}")
    sections.append(f"- Do NOT retry: {', '.join(str(c) for c in retry.do_not_retry_on)}")
    sections.append("")

    sections.append("## Failure Philosophy")
    for line in playbook.failure_philosophy:
        sections.append(f"- {line}")

    return "\n".join(sections)
