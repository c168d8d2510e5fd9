"""Result objects and diagnostic types for fluent XML operations.

Queries and flattening never raise on bad input. Instead they hand back a
result object whose diagnostics explain what went wrong, while the simple
string/dict entry points keep returning ``""`` and ``{}``.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()    # Suspicious input that was still processed
    ERROR = auto()
    CRITICAL = auto()   # Operation abandoned, empty result returned


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


class _DiagnosticsMixin:
    """Diagnostic bookkeeping shared by the result objects."""

    diagnostics: List[DiagnosticEntry]
    correlation_id: Optional[str]

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self, severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )


@dataclass
class QueryResult(_DiagnosticsMixin):
    """Outcome of a single path query.

    ``value`` is ``""`` when nothing matched. A malformed expression still
    compiles and runs; it is flagged through WARNING diagnostics so that
    "no match" and "bad expression" can be told apart.
    """

    xpath: str
    pattern: str = ""
    value: str = ""
    matched: bool = False
    whole_element: bool = False
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    correlation_id: Optional[str] = None

    @property
    def found(self) -> bool:
        """True when the query produced a non-empty value."""
        return self.value != ""

    @property
    def is_malformed(self) -> bool:
        """True when the expression fell outside the supported grammar."""
        return bool(self.get_diagnostics_by_severity(DiagnosticSeverity.WARNING))

    def __str__(self) -> str:
        return self.value


@dataclass
class FlattenResult(_DiagnosticsMixin):
    """Outcome of flattening one XML document into dotted keys."""

    mapping: Dict[str, Any] = field(default_factory=dict)
    success: bool = True
    processing_time_ms: float = 0.0
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    correlation_id: Optional[str] = None

    @property
    def key_count(self) -> int:
        """Number of distinct keys in the mapping."""
        return len(self.mapping)

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the flatten operation."""
        return {
            "success": self.success,
            "key_count": self.key_count,
            "processing_time_ms": self.processing_time_ms,
            "has_errors": self.has_errors(),
            "diagnostic_count": len(self.diagnostics),
            "correlation_id": self.correlation_id,
        }
