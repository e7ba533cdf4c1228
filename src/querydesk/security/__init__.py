"""Pre-execution policies: command whitelist and statement denylist."""
from querydesk.security.commands import ALLOWED_COMMANDS, is_allowed, split_command
from querydesk.security.injection import SUSPICIOUS_PATTERNS, is_suspicious, matched_pattern

__all__ = [
    "ALLOWED_COMMANDS",
    "is_allowed",
    "split_command",
    "SUSPICIOUS_PATTERNS",
    "is_suspicious",
    "matched_pattern",
]
