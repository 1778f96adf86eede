"""MCP tool definitions wrapping the vars engine."""

from __future__ import annotations

from typing import Any

from .engine import VarsEngine
from .errors import (
    IndexOutOfBounds,
    NotFound,
    ParseError,
    PathSyntaxError,
    PentenvError,
    TypeMismatch,
    WorkspaceError,
)
from .values import render, serialize

PATH_DESCRIPTION = (
    'Dotted path into the vars document, e.g. "ip", "creds[0].password". '
    "Field names run up to the next '.', '[' or ']'; indices are non-negative integers."
)


def make_tools(engine: VarsEngine) -> dict[str, dict]:
    """Create MCP tool definitions for the vars engine.

    Returns:
        Dict mapping tool names to their definitions.
    """

    tools = {}

    # ========== vars_refer ==========
    tools["vars_refer"] = {
        "name": "vars_refer",
        "description": "Read the value stored at a path in the workspace vars document. A missing path is reported with found=false, not as an error.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": PATH_DESCRIPTION,
                },
            },
            "required": ["path"],
        },
    }

    # ========== vars_modify ==========
    tools["vars_modify"] = {
        "name": "vars_modify",
        "description": "Store a value at a path. Missing object keys are created; array elements are never created.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": PATH_DESCRIPTION,
                },
                "value": {
                    "description": "Value to store. Strings that are valid JSON are stored as JSON unless as_string is set.",
                },
                "as_string": {
                    "type": "boolean",
                    "description": "Store a string value verbatim even if it is valid JSON",
                    "default": False,
                },
            },
            "required": ["path", "value"],
        },
    }

    # ========== vars_show ==========
    tools["vars_show"] = {
        "name": "vars_show",
        "description": "Return the whole vars document.",
        "inputSchema": {
            "type": "object",
            "properties": {},
        },
    }

    return tools


async def execute_tool(engine: VarsEngine, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Execute a vars tool and return the result.

    Args:
        engine: VarsEngine instance
        name: Tool name
        arguments: Tool arguments

    Returns:
        Result dict with success status and data or error
    """
    try:
        if name == "vars_refer":
            path = arguments["path"]
            try:
                value = engine.refer(path)
            except NotFound as e:
                return {
                    "success": True,
                    "found": False,
                    "path": path,
                    "message": str(e),
                }
            return {
                "success": True,
                "found": True,
                "path": path,
                "value": value,
                "rendered": render(value),
            }

        elif name == "vars_modify":
            raw = arguments["value"]
            as_string = bool(arguments.get("as_string", False))
            if not isinstance(raw, str):
                # Structured values arrive already decoded
                raw = serialize(raw)
                as_string = False
            result = engine.modify(arguments["path"], raw, as_string=as_string)
            return {
                "success": True,
                "path": result.path,
                "value": result.value,
                "message": f"{result.path} updated",
            }

        elif name == "vars_show":
            return {
                "success": True,
                "vars": engine.load(),
            }

        else:
            return {
                "success": False,
                "error": f"Unknown tool: {name}",
            }

    except ParseError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "parse_error",
            "suggestion": "The vars document is not valid JSON; fix or recreate it",
        }

    except PathSyntaxError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "path_syntax_error",
            "suggestion": 'Use paths like "ip" or "creds[0].password"',
        }

    except TypeMismatch as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "type_mismatch",
            "expected": e.expected,
            "found": e.found,
        }

    except IndexOutOfBounds as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "index_out_of_bounds",
            "index": e.index,
            "length": e.length,
            "suggestion": "Arrays are never grown; store the whole array instead",
        }

    except WorkspaceError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "workspace_error",
        }

    except PentenvError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "pentenv_error",
        }

    except Exception as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": "unexpected_error",
        }
