"""
Error types and diagnostics for token export.

Failures are grouped into three kinds:
- SourceUnavailable: the variable source cannot enumerate collections/variables
- MalformedVariable: a variable's name or value does not have the expected shape
- UnresolvedAlias: a variable value references another variable and was not resolved
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Dict, Any


class DiagnosticKind(str, Enum):
    """Kind of problem recorded during an export."""
    SOURCE_UNAVAILABLE = "source_unavailable"
    MALFORMED_VARIABLE = "malformed_variable"
    UNRESOLVED_ALIAS = "unresolved_alias"


class TokenExportError(Exception):
    """Base class for token export errors."""
    kind: DiagnosticKind = DiagnosticKind.MALFORMED_VARIABLE

    def __init__(
        self,
        message: str,
        variable_id: Optional[str] = None,
        name: Optional[str] = None,
        mode_id: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.variable_id = variable_id
        self.name = name
        self.mode_id = mode_id

    def to_diagnostic(self) -> "Diagnostic":
        return Diagnostic(
            kind=self.kind,
            message=self.message,
            variable_id=self.variable_id,
            name=self.name,
            mode_id=self.mode_id,
        )


class SourceUnavailable(TokenExportError):
    """The variable source could not be read."""
    kind = DiagnosticKind.SOURCE_UNAVAILABLE


class MalformedVariable(TokenExportError):
    """A variable's name or value does not match what the builder expects."""
    kind = DiagnosticKind.MALFORMED_VARIABLE


class UnresolvedAlias(TokenExportError):
    """A variable value is an alias that was not (or could not be) resolved."""
    kind = DiagnosticKind.UNRESOLVED_ALIAS


@dataclass
class Diagnostic:
    """A single recoverable problem found during export."""
    kind: DiagnosticKind
    message: str
    variable_id: Optional[str] = None
    name: Optional[str] = None
    mode_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['kind'] = self.kind.value
        return {k: v for k, v in data.items() if v is not None}
