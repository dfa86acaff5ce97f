"""
Token tree and the builder that folds variables into it.

A tree is made of Branch nodes (segment -> child) and Leaf nodes holding a
normalized color. Variables are folded one at a time; each fold either
writes all of the variable's leaves or none of them.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Iterator, Tuple, Union, Sequence

from tokens.colors import is_color_value, normalize_color
from tokens.errors import Diagnostic, MalformedVariable, TokenExportError, UnresolvedAlias
from tokens.models import AliasReference, ModeDescriptor, VariableRecord
from tokens.naming import format_color_line, normalize_segment, path_segments

logger = logging.getLogger(__name__)

Path = Tuple[str, ...]


@dataclass
class Leaf:
    """A token value."""
    value: str
    type: str = "color"

    def to_dict(self) -> Dict[str, Any]:
        return {'value': self.value, 'type': self.type}


@dataclass
class Branch:
    """A group of tokens keyed by path segment."""
    children: Dict[str, "TreeNode"] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.children)

    def get(self, path: Sequence[str]) -> Optional["TreeNode"]:
        """Node at path, or None."""
        node: TreeNode = self
        for segment in path:
            if not isinstance(node, Branch):
                return None
            node = node.children.get(segment)
            if node is None:
                return None
        return node

    def child(self, segment: str) -> "Branch":
        """Existing branch for segment, created if absent."""
        node = self.children.get(segment)
        if node is None:
            node = Branch()
            self.children[segment] = node
        elif isinstance(node, Leaf):
            raise MalformedVariable(f"'{segment}' is already a token, cannot nest under it")
        return node

    def set_leaf(self, path: Sequence[str], leaf: Leaf) -> None:
        node = self
        for segment in path[:-1]:
            node = node.child(segment)
        existing = node.children.get(path[-1])
        if isinstance(existing, Branch):
            raise MalformedVariable(f"'{path[-1]}' is already a token group, cannot replace it")
        node.children[path[-1]] = leaf

    def walk_leaves(self, prefix: Path = ()) -> Iterator[Tuple[Path, Leaf]]:
        """Yield (path, leaf) pairs depth-first in insertion order."""
        for segment, node in self.children.items():
            if isinstance(node, Leaf):
                yield prefix + (segment,), node
            else:
                yield from node.walk_leaves(prefix + (segment,))

    def to_dict(self) -> Dict[str, Any]:
        return {segment: node.to_dict() for segment, node in self.children.items()}


TreeNode = Union[Branch, Leaf]


@dataclass
class FoldOutcome:
    """What one variable contributed to the tree."""
    leaves: List[Path] = field(default_factory=list)
    lines: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def contributed(self) -> bool:
        return bool(self.leaves)


def _check_placement(tree: Branch, path: Path) -> None:
    """Raise if writing a leaf at path would clobber existing structure."""
    node: TreeNode = tree
    for depth, segment in enumerate(path):
        node = node.children.get(segment)
        if node is None:
            return
        last = depth == len(path) - 1
        if last and isinstance(node, Branch):
            raise MalformedVariable(
                f"'{'.'.join(path)}' is already a token group, cannot replace it"
            )
        if not last and isinstance(node, Leaf):
            raise MalformedVariable(
                f"'{'.'.join(path[:depth + 1])}' is already a token, cannot nest under it"
            )


class TokenTreeBuilder:
    """
    Folds color variables into a single token tree.

    The builder owns its tree until build() hands it over. Variables whose
    collection has more than one mode get a mode branch under their last
    path segment:

        color/accent, modes Light+Dark -> color.accent.light, color.accent.dark
        color/accent, single mode      -> color.accent
    """

    def __init__(self, tree: Optional[Branch] = None):
        self._tree = tree if tree is not None else Branch()

    def fold(self, variable: VariableRecord, modes: Sequence[ModeDescriptor]) -> FoldOutcome:
        """
        Fold one variable into the tree.

        Never raises: a variable that cannot be placed contributes nothing and
        the reason is returned as a diagnostic.
        """
        outcome = FoldOutcome()
        try:
            placements = self._placements(variable, modes, outcome)
            for path, _leaf, _line in placements:
                _check_placement(self._tree, path)
            for path, leaf, line in placements:
                self._tree.set_leaf(path, leaf)
                outcome.leaves.append(path)
                outcome.lines.append(line)
        except TokenExportError as e:
            e.variable_id = e.variable_id or variable.id
            e.name = e.name or variable.name
            logger.warning("Skipping variable %r: %s", variable.name, e.message)
            outcome.diagnostics.append(e.to_diagnostic())
        except Exception as e:
            logger.warning("Skipping variable %r: %s: %s", variable.name, type(e).__name__, e)
            outcome.diagnostics.append(Diagnostic(
                kind=MalformedVariable.kind,
                message=f"{type(e).__name__}: {e}",
                variable_id=variable.id,
                name=variable.name,
            ))
        else:
            logger.debug("Folded %r into %d leaves", variable.name, len(outcome.leaves))
        return outcome

    def build(self) -> Branch:
        """Hand over the assembled tree."""
        return self._tree

    def _placements(
        self,
        variable: VariableRecord,
        modes: Sequence[ModeDescriptor],
        outcome: FoldOutcome
    ) -> List[Tuple[Path, Leaf, str]]:
        segments = path_segments(variable.name)
        number_of_modes = len(variable.values_by_mode)
        mode_names = {m.mode_id: m.name for m in modes}
        placements: List[Tuple[Path, Leaf, str]] = []
        used_mode_keys: Dict[str, str] = {}

        for mode_id, raw in variable.values_by_mode.items():
            if isinstance(raw, AliasReference):
                outcome.diagnostics.append(UnresolvedAlias(
                    f"Value is an alias of variable '{raw.target_id}'",
                    variable_id=variable.id,
                    name=variable.name,
                    mode_id=mode_id,
                ).to_diagnostic())
                continue
            if not is_color_value(raw):
                raise MalformedVariable(
                    f"Expected a color value for mode '{mode_id}', got {type(raw).__name__}",
                    mode_id=mode_id,
                )

            hex_value = normalize_color(raw)
            mode_name: Optional[str] = None
            path: Path = tuple(segments)
            if number_of_modes > 1:
                mode_name = mode_names.get(mode_id)
                if mode_name is None:
                    raise MalformedVariable(f"Unknown mode '{mode_id}'", mode_id=mode_id)
                mode_key = normalize_segment(mode_name) or mode_id
                if mode_key in used_mode_keys:
                    raise MalformedVariable(
                        f"Modes '{used_mode_keys[mode_key]}' and '{mode_id}' both map to '{mode_key}'",
                        mode_id=mode_id,
                    )
                used_mode_keys[mode_key] = mode_id
                path = path + (mode_key,)

            placements.append((
                path,
                Leaf(value=hex_value, type="color"),
                format_color_line(variable.name, hex_value, mode_name),
            ))
        return placements
