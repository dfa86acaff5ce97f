"""
Name transforms for Figma variable names.

Variable names use '/' as the hierarchy separator ("Color/Brand Primary").
path_segments() turns a name into token tree keys; display_name() produces
the flat, hyphenated label used by the "name: value" output.
"""

import re
from typing import List, Optional

from tokens.errors import MalformedVariable

PATH_SEPARATOR = "/"

_WHITESPACE_RE = re.compile(r'\s+')
_CASE_BOUNDARY_RE = re.compile(r'([a-z])([A-Z])')
_DISPLAY_SEPARATOR_RE = re.compile(r'[\s_/]+')


def normalize_segment(segment: str) -> str:
    """Trim, lower-case and hyphenate whitespace runs in one path segment."""
    return _WHITESPACE_RE.sub('-', segment.strip().lower())


def path_segments(name: str) -> List[str]:
    """
    Split a variable name into normalized tree path segments.

    Examples:
        - "Color/Brand Primary" -> ["color", "brand-primary"]
        - "accent" -> ["accent"]
    """
    if not isinstance(name, str):
        raise MalformedVariable(f"Variable name must be a string, got {type(name).__name__}")

    segments = [normalize_segment(part) for part in name.split(PATH_SEPARATOR)]
    segments = [s for s in segments if s]
    if not segments:
        raise MalformedVariable(f"Variable name {name!r} has no path segments", name=name)
    return segments


def display_name(name: str) -> str:
    """
    Flat label for a name: camelCase boundaries, whitespace, '_' and '/'
    all become single hyphens.

    Example: "color/brandPrimary 500" -> "color-brand-primary-500"
    """
    label = _CASE_BOUNDARY_RE.sub(r'\1-\2', name)
    label = _DISPLAY_SEPARATOR_RE.sub('-', label)
    return label.lower()


def format_color_line(name: str, value: str, mode: Optional[str] = None) -> str:
    """Render one "name: value" line, suffixing the mode when present."""
    label = display_name(name)
    if mode:
        return f"{label}-{display_name(mode)}: {value}"
    return f"{label}: {value}"
