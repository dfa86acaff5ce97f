"""Figma color variables to design token trees."""

from tokens.colors import ColorComponents, normalize_color
from tokens.errors import (
    Diagnostic, DiagnosticKind, TokenExportError, SourceUnavailable, MalformedVariable, UnresolvedAlias,
)
from tokens.export import ExportResult, ExportStatus, export_color_tokens
from tokens.models import AliasReference, ModeDescriptor, VariableCollection, VariableRecord
from tokens.naming import display_name, format_color_line, path_segments
from tokens.source import FigmaRestVariableSource, InMemoryVariableSource, VariableSource
from tokens.tree import Branch, Leaf, TokenTreeBuilder

__all__ = [
    "AliasReference",
    "Branch",
    "ColorComponents",
    "Diagnostic",
    "DiagnosticKind",
    "ExportResult",
    "ExportStatus",
    "FigmaRestVariableSource",
    "InMemoryVariableSource",
    "Leaf",
    "MalformedVariable",
    "ModeDescriptor",
    "SourceUnavailable",
    "TokenExportError",
    "TokenTreeBuilder",
    "UnresolvedAlias",
    "VariableCollection",
    "VariableRecord",
    "VariableSource",
    "display_name",
    "export_color_tokens",
    "format_color_line",
    "normalize_color",
    "path_segments",
]
