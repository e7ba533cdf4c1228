"""Whitelist of kubectl verbs accepted in native command mode."""
from typing import FrozenSet, List, Tuple

# Read-only verbs. Order is kept for error messages.
ALLOWED_COMMANDS: Tuple[str, ...] = (
    "get",
    "describe",
    "logs",
    "top",
    "explain",
    "api-resources",
    "api-versions",
    "cluster-info",
)

_ALLOWED: FrozenSet[str] = frozenset(ALLOWED_COMMANDS)


def is_allowed(verb: str) -> bool:
    """Returns True if ``verb`` may be passed to the external tool."""
    return verb in _ALLOWED


def split_command(text: str) -> Tuple[str, List[str]]:
    """Splits a native command into its verb and arguments on whitespace."""
    parts = text.split()
    if not parts:
        return "", []
    return parts[0], parts[1:]


def describe_allowed() -> str:
    return f"Only these commands are allowed: {', '.join(ALLOWED_COMMANDS)}"
