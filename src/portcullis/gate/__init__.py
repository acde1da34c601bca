"""
Gate - Token gating decisions for Portcullis.

Reads balances through the token views and turns them into Granted /
Denied / Errored decisions, singly or in concurrent batches.
"""

from .decision import (
    AccessDecision,
    Denied,
    Errored,
    Granted,
    TokenKind,
    TokenRequirement,
)
from .engine import DEFAULT_MAX_WORKERS, GatingEngine

__all__ = [
    "AccessDecision",
    "DEFAULT_MAX_WORKERS",
    "Denied",
    "Errored",
    "GatingEngine",
    "Granted",
    "TokenKind",
    "TokenRequirement",
]
