"""
Export orchestration.

An export runs in two phases:
1. Gather: enumerate collections and fetch every variable concurrently.
   Nothing shared is mutated here.
2. Fold: feed color variables to a TokenTreeBuilder one by one.

export_color_tokens() never raises; the result says whether the export
succeeded, succeeded partially, or failed.
"""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, List, Dict, Any, Tuple

from tokens.aliases import AliasResolver
from tokens.errors import Diagnostic, DiagnosticKind
from tokens.models import VariableCollection, VariableRecord
from tokens.source import VariableSource
from tokens.tree import Branch, TokenTreeBuilder

logger = logging.getLogger(__name__)


class ExportStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class ExportResult:
    """Outcome of one export."""
    status: ExportStatus
    tree: Branch = field(default_factory=Branch)
    lines: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    variable_count: int = 0
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status != ExportStatus.FAILED

    @property
    def token_count(self) -> int:
        return sum(1 for _ in self.tree.walk_leaves())

    @property
    def message(self) -> str:
        """One-line status for the user."""
        if self.status == ExportStatus.FAILED:
            reasons = [d.message for d in self.diagnostics if d.kind == DiagnosticKind.SOURCE_UNAVAILABLE]
            detail = f": {reasons[0]}" if reasons else ""
            return f"Export failed{detail}"
        if self.status == ExportStatus.PARTIAL and self.token_count == 0:
            return f"Exported 0 color tokens ({len(self.diagnostics)} skipped values, see diagnostics)"
        if self.token_count == 0:
            return "No color variables to export"
        summary = f"Exported {self.token_count} color tokens from {self.variable_count} variables"
        if self.status == ExportStatus.PARTIAL:
            summary += f" ({len(self.diagnostics)} skipped values, see diagnostics)"
        return summary

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status.value,
            'message': self.message,
            'tokens': self.tree.to_dict(),
            'diagnostics': [d.to_dict() for d in self.diagnostics],
        }


Gathered = List[Tuple[VariableCollection, List[VariableRecord]]]


async def _gather(
    source: VariableSource,
    resolve_aliases: bool,
    diagnostics: List[Diagnostic]
) -> Gathered:
    collections = await source.list_collections()
    id_lists = await asyncio.gather(*(source.list_variables_in(c.id) for c in collections))

    fetches = [
        asyncio.gather(*(source.get_variable(vid) for vid in ids), return_exceptions=True)
        for ids in id_lists
    ]
    fetched = await asyncio.gather(*fetches)

    gathered: Gathered = []
    for collection, ids, results in zip(collections, id_lists, fetched):
        records: List[VariableRecord] = []
        for variable_id, result in zip(ids, results):
            if isinstance(result, BaseException):
                logger.warning("Could not fetch variable %s: %s", variable_id, result)
                diagnostics.append(Diagnostic(
                    kind=DiagnosticKind.SOURCE_UNAVAILABLE,
                    message=f"Could not fetch variable: {result}",
                    variable_id=variable_id,
                ))
            elif result is None:
                diagnostics.append(Diagnostic(
                    kind=DiagnosticKind.MALFORMED_VARIABLE,
                    message="Variable not found",
                    variable_id=variable_id,
                ))
            elif result.is_color:
                records.append(result)
        gathered.append((collection, records))

    if resolve_aliases:
        resolver = AliasResolver(source, {c.id: c for c in collections})
        for index, (collection, records) in enumerate(gathered):
            resolved: List[VariableRecord] = []
            for record in records:
                if record.collection_id is None:
                    record = replace(record, collection_id=collection.id)
                record, found = await resolver.resolve(record)
                diagnostics.extend(found)
                resolved.append(record)
            gathered[index] = (collection, resolved)

    return gathered


def _dedupe(diagnostics: List[Diagnostic]) -> List[Diagnostic]:
    seen = set()
    unique = []
    for d in diagnostics:
        key = (d.kind, d.variable_id, d.mode_id)
        if d.kind == DiagnosticKind.UNRESOLVED_ALIAS and key in seen:
            continue
        seen.add(key)
        unique.append(d)
    return unique


async def export_color_tokens(
    source: VariableSource,
    *,
    resolve_aliases: bool = False,
    fetch_timeout: Optional[float] = None
) -> ExportResult:
    """
    Build the color token tree for every collection in a source.

    Args:
        source: Where collections and variables are read from
        resolve_aliases: Follow alias values to the colors they reference
            instead of dropping them
        fetch_timeout: Deadline in seconds for the gather phase

    Returns:
        ExportResult with status FAILED and an empty tree if the source
        could not be enumerated, PARTIAL if some values were skipped.
    """
    diagnostics: List[Diagnostic] = []
    try:
        gathered = await asyncio.wait_for(_gather(source, resolve_aliases, diagnostics), fetch_timeout)
    except asyncio.TimeoutError:
        logger.error("Fetching variables exceeded %ss deadline", fetch_timeout)
        return ExportResult(
            status=ExportStatus.FAILED,
            diagnostics=[Diagnostic(
                kind=DiagnosticKind.SOURCE_UNAVAILABLE,
                message=f"Fetching variables timed out after {fetch_timeout}s",
            )],
            error=TimeoutError(f"Fetching variables timed out after {fetch_timeout}s"),
        )
    except Exception as e:
        logger.error("Could not enumerate variables: %s: %s", type(e).__name__, e)
        return ExportResult(
            status=ExportStatus.FAILED,
            diagnostics=[Diagnostic(kind=DiagnosticKind.SOURCE_UNAVAILABLE, message=str(e) or type(e).__name__)],
            error=e,
        )

    builder = TokenTreeBuilder()
    lines: List[str] = []
    variable_count = 0
    for collection, records in gathered:
        for record in records:
            variable_count += 1
            outcome = builder.fold(record, collection.modes)
            lines.extend(outcome.lines)
            diagnostics.extend(outcome.diagnostics)

    diagnostics = _dedupe(diagnostics)
    status = ExportStatus.PARTIAL if diagnostics else ExportStatus.SUCCESS
    result = ExportResult(
        status=status,
        tree=builder.build(),
        lines=lines,
        diagnostics=diagnostics,
        variable_count=variable_count,
    )
    logger.info(result.message)
    return result
