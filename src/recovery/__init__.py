"""Recovery of structured values and diagrams from raw model output."""

from recovery.diagram import FALLBACK_DIAGRAM, normalize_diagram, normalize_embedded_diagrams
from recovery.json_repair import (
    FailureKind,
    RecoveryFailure,
    StructuredValueError,
    parse_structured_value,
    recover_structured_value,
)

__all__ = [
    "FALLBACK_DIAGRAM",
    "FailureKind",
    "RecoveryFailure",
    "StructuredValueError",
    "normalize_diagram",
    "normalize_embedded_diagrams",
    "parse_structured_value",
    "recover_structured_value",
]
