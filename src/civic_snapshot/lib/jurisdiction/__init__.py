"""Jurisdiction library — canonical state and jurisdiction identifiers.

Public API:
    - resolve_jurisdiction: State input -> Open States jurisdiction ID
    - resolve_state_code: State input -> two-letter code
    - state_name: State input -> display name
"""

from civic_snapshot.lib.jurisdiction.resolver import (
    STATE_NAMES,
    resolve_jurisdiction,
    resolve_state_code,
    state_name,
)

__all__ = [
    "STATE_NAMES",
    "resolve_jurisdiction",
    "resolve_state_code",
    "state_name",
]
