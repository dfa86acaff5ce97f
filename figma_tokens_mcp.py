#!/usr/bin/env python3
"""
Figma Tokens MCP Server - Model Context Protocol server exporting Figma
variables as design tokens.

This server provides tools to:
- List variable collections and their modes
- Export color variables as a nested token tree (JSON), CSS custom
  properties or flat "name: value" lines

Author: Yusuf Demirkoparan
"""

import json
import re
from typing import Dict, Any
from enum import Enum

import httpx
from pydantic import BaseModel, Field, field_validator, ConfigDict
from mcp.server.fastmcp import FastMCP

from tokens.config import Settings
from tokens.errors import TokenExportError
from tokens.export import ExportResult, export_color_tokens
from tokens.formats import flatten, to_css, to_json, to_lines
from tokens.log import setup_logger
from tokens.source import FigmaRestVariableSource

# ============================================================================
# Constants
# ============================================================================

CHARACTER_LIMIT = 25000

# ============================================================================
# Initialize MCP Server
# ============================================================================

mcp = FastMCP("figma_tokens_mcp")

# ============================================================================
# Enums and Types
# ============================================================================

class ResponseFormat(str, Enum):
    """Output format for listing tools."""
    MARKDOWN = "markdown"
    JSON = "json"


class TokenFormat(str, Enum):
    """Output format for exported tokens."""
    JSON = "json"
    CSS = "css"
    LINES = "lines"
    FLAT = "flat"


# ============================================================================
# Pydantic Input Models
# ============================================================================

def _extract_file_key(v: str) -> str:
    # Extract file key from URL if full URL provided
    if 'figma.com' in v:
        match = re.search(r'figma\.com/(?:design|file)/([a-zA-Z0-9]+)', v)
        if match:
            return match.group(1)
        raise ValueError("Could not extract file key from Figma URL")
    return v


class FigmaFileInput(BaseModel):
    """Input model for file operations."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(
        ...,
        description="Figma file key (from URL: figma.com/design/FILE_KEY/...)",
        min_length=10,
        max_length=200
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' or 'json'"
    )

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        return _extract_file_key(v)


class FigmaVariableTokensInput(BaseModel):
    """Input model for variable token export."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    file_key: str = Field(
        ...,
        description="Figma file key or full file URL",
        min_length=10,
        max_length=200
    )
    token_format: TokenFormat = Field(
        default=TokenFormat.JSON,
        description=(
            "Output format: 'json' (nested tree), 'css' (custom properties), "
            "'lines' (name: value) or 'flat' (JSON of joined path -> hex)"
        )
    )
    resolve_aliases: bool = Field(
        default=False,
        description="Follow aliased values to the colors they reference instead of skipping them"
    )
    include_remote: bool = Field(
        default=False,
        description="Include collections published from libraries"
    )
    css_selector: str = Field(
        default=":root",
        description="Selector wrapping CSS custom properties",
        min_length=1
    )

    @field_validator('file_key')
    @classmethod
    def validate_file_key(cls, v: str) -> str:
        return _extract_file_key(v)


# ============================================================================
# Helper Functions
# ============================================================================

def _settings() -> Settings:
    return Settings.from_env()


def _handle_api_error(e: BaseException) -> str:
    """Format API errors for user-friendly messages."""
    # Source errors wrap the transport error that caused them
    if isinstance(e, TokenExportError) and e.__cause__ is not None:
        e = e.__cause__
    if isinstance(e, httpx.HTTPStatusError):
        status = e.response.status_code
        if status == 401:
            return "Error: Invalid Figma API token. Check your FIGMA_ACCESS_TOKEN environment variable."
        elif status == 403:
            return ("Error: Access denied. Reading variables requires the file_variables:read scope "
                    "and an Enterprise plan member seat.")
        elif status == 404:
            return "Error: File not found. Check the file key."
        elif status == 429:
            return "Error: Rate limit exceeded. Please wait before making more requests."
        return f"Error: Figma API returned status {status}"
    elif isinstance(e, (httpx.TimeoutException, TimeoutError)):
        return "Error: Request timed out. The file might be too large."
    elif isinstance(e, (ValueError, TokenExportError)):
        return f"Error: {str(e)}"
    return f"Error: {type(e).__name__}: {str(e)}"


def _render_tokens(result: ExportResult, params: FigmaVariableTokensInput) -> str:
    if params.token_format == TokenFormat.CSS:
        return to_css(result.lines, params.css_selector)
    if params.token_format == TokenFormat.LINES:
        return to_lines(result.lines)
    if params.token_format == TokenFormat.FLAT:
        return to_json(flatten(result.tree))

    body: Dict[str, Any] = {
        '$schema': 'https://design-tokens.github.io/community-group/format/',
        'figmaFile': params.file_key,
        **result.to_dict(),
    }
    return to_json(body)


# ============================================================================
# MCP Tools
# ============================================================================

@mcp.tool(
    name="figma_list_variable_collections",
    annotations={
        "title": "List Variable Collections",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_list_variable_collections(params: FigmaFileInput) -> str:
    """
    List the local variable collections of a Figma file with their modes.

    Args:
        params: FigmaFileInput containing:
            - file_key (str): Figma file key or full URL
            - response_format: 'markdown' or 'json'

    Returns:
        str: Collections in requested format
    """
    try:
        source = FigmaRestVariableSource(params.file_key, settings=_settings())
        collections = await source.list_collections()

        if params.response_format == ResponseFormat.JSON:
            return json.dumps([
                {
                    'id': c.id,
                    'name': c.name,
                    'modes': [{'modeId': m.mode_id, 'name': m.name} for m in c.modes],
                    'defaultModeId': c.default_mode_id,
                    'variableCount': len(c.variable_ids),
                }
                for c in collections
            ], indent=2)

        lines = [
            "# Variable Collections",
            f"**File Key:** `{params.file_key}`",
            ""
        ]
        if not collections:
            lines.append("_No local variable collections._")
        for c in collections:
            mode_names = ", ".join(m.name for m in c.modes) or "none"
            lines.append(f"- **{c.name}** `{c.id}` ({len(c.variable_ids)} variables, modes: {mode_names})")

        return "\n".join(lines)

    except Exception as e:
        return _handle_api_error(e)


@mcp.tool(
    name="figma_export_variable_tokens",
    annotations={
        "title": "Export Color Variables as Tokens",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True
    }
)
async def figma_export_variable_tokens(params: FigmaVariableTokensInput) -> str:
    """
    Export the color variables of a Figma file as design tokens.

    Variable names become the token path ("Color/Brand Primary" ->
    color.brand-primary). Collections with several modes get one token per
    mode (color.brand-primary.light, color.brand-primary.dark). Colors are
    8-digit hex (#rrggbbaa).

    Args:
        params: FigmaVariableTokensInput containing:
            - file_key (str): Figma file key or full URL
            - token_format: 'json', 'css', 'lines' or 'flat'
            - resolve_aliases (bool): Follow aliases instead of skipping them
            - include_remote (bool): Include library collections
            - css_selector (str): Selector for CSS output

    Returns:
        str: Tokens in requested format, or a JSON {"message": ...} on failure

    Examples:
        - "Export color tokens of XYZ123 as CSS" -> file_key="XYZ123", token_format="css"
    """
    try:
        settings = _settings()
        source = FigmaRestVariableSource(
            params.file_key,
            settings=settings,
            include_remote=params.include_remote
        )
    except Exception as e:
        return json.dumps({"message": _handle_api_error(e)}, indent=2)

    result = await export_color_tokens(
        source,
        resolve_aliases=params.resolve_aliases,
        fetch_timeout=settings.export_deadline
    )

    if not result.ok:
        message = _handle_api_error(result.error) if result.error else result.message
        return json.dumps({"message": message}, indent=2)

    output = _render_tokens(result, params)
    if len(output) > CHARACTER_LIMIT:
        return json.dumps({
            'truncated': True,
            'message': f'Result exceeded {CHARACTER_LIMIT} characters. Try the css or lines format.',
            'tokenCount': result.token_count,
        }, indent=2)
    return output


# ============================================================================
# Entry Point
# ============================================================================

def main() -> None:
    settings = _settings()
    setup_logger("tokens", settings.log_level, settings.log_file)
    mcp.run()


if __name__ == "__main__":
    main()
