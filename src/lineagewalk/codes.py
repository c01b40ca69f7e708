"""Diagnostic code constants for lineagewalk.api results.

These constants prevent stringly-typed diagnostic codes in client code.
"""

from enum import Enum


class DiagnosticCode(str, Enum):
    """Diagnostic codes attached to traversal results."""

    # Errors (the result is empty or truncated)
    INVALID_LINEAGE = "INVALID_LINEAGE"
    VISIT_BUDGET_EXCEEDED = "VISIT_BUDGET_EXCEEDED"

    # Warnings (the result is complete for the data given)
    MISSING_SEED = "MISSING_SEED"
    SEED_FILTERED = "SEED_FILTERED"
    DANGLING_EDGE = "DANGLING_EDGE"
