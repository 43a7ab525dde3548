"""Credential lookup for JWT signing, object storage and outbound email.

Values are read from the process environment only; error messages name the
missing variable but never echo what was found.
"""
from __future__ import annotations

import os
from typing import Final

__all__ = ["MissingSecretError", "require_secret", "require_secrets", "is_placeholder"]


class MissingSecretError(RuntimeError):
    """A credential the current operation needs is unset or still a template value."""

    def __init__(self, name: str, reason: str = "is required and must not be a placeholder") -> None:
        super().__init__(f"Environment variable {name} {reason}")
        self.name = name


# Values shipped in .env templates and deployment docs
_TEMPLATE_VALUES: Final[frozenset[str]] = frozenset(
    {
        "changeme",
        "change-me",
        "placeholder",
        "your-key-here",
        "your-secret-here",
        "spaces-key",
        "spaces-secret",
        "jwt-secret",
    }
)


def is_placeholder(value: str | None) -> bool:
    cleaned = (value or "").strip().lower()
    return cleaned == "" or cleaned in _TEMPLATE_VALUES or cleaned.startswith("<")


def require_secret(name: str, *, min_length: int = 1) -> str:
    """Return the trimmed value of ``name`` or raise :class:`MissingSecretError`."""

    raw = os.environ.get(name)
    if is_placeholder(raw):
        raise MissingSecretError(name)
    value = raw.strip()
    if len(value) < min_length:
        raise MissingSecretError(name, f"must be at least {min_length} characters")
    return value


def require_secrets(*names: str) -> tuple[str, ...]:
    """Resolve several credentials at once, reporting every missing name together."""

    missing = [name for name in names if is_placeholder(os.environ.get(name))]
    if missing:
        raise MissingSecretError(", ".join(missing))
    return tuple(os.environ[name].strip() for name in names)
