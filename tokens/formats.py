"""Serializers for an exported token tree."""

import json
import re
from typing import Any, Dict, List, Mapping, Sequence

from tokens.tree import Branch

_CSS_INVALID_RE = re.compile(r'[^a-z0-9]+')


def to_json(data: Mapping[str, Any], indent: int = 2) -> str:
    """Indented JSON, non-ASCII kept as is."""
    return json.dumps(data, indent=indent, ensure_ascii=False)


def flatten(tree: Branch, sep: str = "-") -> Dict[str, str]:
    """Map joined leaf paths to their values."""
    return {sep.join(path): leaf.value for path, leaf in tree.walk_leaves()}


def to_lines(lines: Sequence[str]) -> str:
    """Plain "name: value" lines."""
    return "\n".join(lines)


def css_property_name(name: str) -> str:
    """Custom property identifier: runs of characters outside [a-z0-9] become one hyphen."""
    return _CSS_INVALID_RE.sub('-', name.lower()).strip('-')


def to_css(lines: Sequence[str], selector: str = ":root") -> str:
    """
    Wrap "name: value" lines in a CSS custom property block.

    Example:
        :root {
          --color-accent: #ff0000ff;
        }
    """
    body: List[str] = []
    for line in lines:
        name, _, value = line.rpartition(": ")
        body.append(f"  --{css_property_name(name)}: {value};")
    return "\n".join([f"{selector} {{", *body, "}"])
