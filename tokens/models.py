"""Variable data model, as read from a Figma file."""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

from tokens.colors import is_alias_value

COLOR_TYPE = "COLOR"


@dataclass(frozen=True)
class ModeDescriptor:
    """One mode of a collection, e.g. Light or Dark."""
    mode_id: str
    name: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ModeDescriptor":
        return cls(mode_id=data['modeId'], name=data.get('name', data['modeId']))


@dataclass(frozen=True)
class AliasReference:
    """A value that points at another variable."""
    target_id: str


@dataclass
class VariableRecord:
    """A single variable with one raw value per mode."""
    id: str
    name: str
    values_by_mode: Dict[str, Any] = field(default_factory=dict)
    resolved_type: str = COLOR_TYPE
    collection_id: Optional[str] = None

    @property
    def is_color(self) -> bool:
        return self.resolved_type == COLOR_TYPE

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "VariableRecord":
        """Build from a Figma REST `variables` entry."""
        values: Dict[str, Any] = {}
        for mode_id, raw in (data.get('valuesByMode') or {}).items():
            values[mode_id] = AliasReference(raw['id']) if is_alias_value(raw) else raw
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            values_by_mode=values,
            resolved_type=data.get('resolvedType', ''),
            collection_id=data.get('variableCollectionId'),
        )


@dataclass
class VariableCollection:
    """A group of variables sharing the same modes."""
    id: str
    name: str = ""
    modes: List[ModeDescriptor] = field(default_factory=list)
    variable_ids: List[str] = field(default_factory=list)
    default_mode_id: Optional[str] = None
    remote: bool = False

    def find_mode(self, mode_id: str) -> Optional[ModeDescriptor]:
        for mode in self.modes:
            if mode.mode_id == mode_id:
                return mode
        return None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "VariableCollection":
        """Build from a Figma REST `variableCollections` entry."""
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            modes=[ModeDescriptor.from_api(m) for m in data.get('modes', [])],
            variable_ids=list(data.get('variableIds', [])),
            default_mode_id=data.get('defaultModeId'),
            remote=bool(data.get('remote', False)),
        )
