"""
Alias resolution.

An alias value points at another variable. Resolution follows the chain
until it reaches a concrete color, choosing the target's value for the same
mode when the target lives in the same collection, otherwise the target
collection's default mode.
"""

import logging
from dataclasses import replace
from typing import Optional, List, Dict, Any, Set, Tuple

from tokens.colors import is_color_value
from tokens.errors import Diagnostic, UnresolvedAlias
from tokens.models import AliasReference, VariableCollection, VariableRecord
from tokens.source import VariableSource

logger = logging.getLogger(__name__)


class AliasResolver:
    """Replaces alias values of a record with the colors they point at."""

    def __init__(self, source: VariableSource, collections: Dict[str, VariableCollection]):
        self.source = source
        self.collections = collections
        self._cache: Dict[str, Optional[VariableRecord]] = {}

    async def _get(self, variable_id: str) -> Optional[VariableRecord]:
        if variable_id not in self._cache:
            self._cache[variable_id] = await self.source.get_variable(variable_id)
        return self._cache[variable_id]

    def _pick_mode(self, target: VariableRecord, mode_id: str, from_collection: Optional[str]) -> str:
        values = target.values_by_mode
        if target.collection_id == from_collection and mode_id in values:
            return mode_id
        collection = self.collections.get(target.collection_id or "")
        if collection and collection.default_mode_id in values:
            return collection.default_mode_id
        if len(values) == 1:
            return next(iter(values))
        if mode_id in values:
            return mode_id
        raise UnresolvedAlias(f"Cannot choose a mode of aliased variable '{target.name}'")

    async def resolve_value(
        self,
        alias: AliasReference,
        mode_id: str,
        collection_id: Optional[str]
    ) -> Dict[str, Any]:
        """Follow an alias chain to a color mapping."""
        seen: Set[str] = set()
        current = alias
        while True:
            if current.target_id in seen:
                raise UnresolvedAlias(f"Alias cycle through variable '{current.target_id}'", mode_id=mode_id)
            seen.add(current.target_id)

            try:
                target = await self._get(current.target_id)
            except Exception as e:
                raise UnresolvedAlias(
                    f"Could not fetch aliased variable '{current.target_id}': {e}", mode_id=mode_id
                ) from e
            if target is None:
                raise UnresolvedAlias(f"Aliased variable '{current.target_id}' not found", mode_id=mode_id)

            mode_id = self._pick_mode(target, mode_id, collection_id)
            collection_id = target.collection_id
            value = target.values_by_mode[mode_id]
            if isinstance(value, AliasReference):
                current = value
                continue
            if not is_color_value(value):
                raise UnresolvedAlias(f"Aliased variable '{target.name}' is not a color", mode_id=mode_id)
            return value

    async def resolve(self, record: VariableRecord) -> Tuple[VariableRecord, List[Diagnostic]]:
        """
        Copy of record with aliases replaced by colors.

        Aliases that cannot be resolved are left in place and reported, the
        tree builder then drops them.
        """
        if not any(isinstance(v, AliasReference) for v in record.values_by_mode.values()):
            return record, []

        diagnostics: List[Diagnostic] = []
        values: Dict[str, Any] = {}
        for mode_id, raw in record.values_by_mode.items():
            if not isinstance(raw, AliasReference):
                values[mode_id] = raw
                continue
            try:
                values[mode_id] = await self.resolve_value(raw, mode_id, record.collection_id)
            except UnresolvedAlias as e:
                e.variable_id = record.id
                e.name = record.name
                e.mode_id = mode_id
                logger.warning("Unresolved alias in %r: %s", record.name, e.message)
                diagnostics.append(e.to_diagnostic())
                values[mode_id] = raw
        return replace(record, values_by_mode=values), diagnostics
