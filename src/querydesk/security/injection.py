"""Heuristic denylist for warehouse statements.

This is not a parser: it catches a handful of obviously destructive or
injection-shaped statements and accepts false negatives.
"""
import re
from typing import Optional, Pattern, Tuple

SUSPICIOUS_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"drop\s+table", re.IGNORECASE),
    re.compile(r"drop\s+database", re.IGNORECASE),
    re.compile(r"delete\s+from.*where\s*1\s*=\s*1", re.IGNORECASE | re.DOTALL),
    re.compile(r"union.*select", re.IGNORECASE | re.DOTALL),
)


def matched_pattern(statement: str) -> Optional[str]:
    """Returns the first pattern matching ``statement``, or None."""
    for pattern in SUSPICIOUS_PATTERNS:
        if pattern.search(statement):
            return pattern.pattern
    return None


def is_suspicious(statement: str) -> bool:
    return matched_pattern(statement) is not None
