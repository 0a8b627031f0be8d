"""Tool descriptors, input schemas and argument preparation."""

from __future__ import annotations

import copy
from typing import Any, Dict, Mapping

import jsonschema

from github_custom_mcp.config import TOOLS_LOGGER
from github_custom_mcp.exceptions import ToolInputValidationError
from github_custom_mcp.mcp_server.models import ToolDescriptor

_OWNER = {"type": "string", "description": "Repository owner (username or organization)"}
_REPO = {"type": "string", "description": "Repository name"}
_PER_PAGE = {
    "type": "integer",
    "description": "Number of results per page (max 100)",
    "minimum": 1,
    "maximum": 100,
    "default": 30,
}


def _object_schema(properties: Mapping[str, Any], required: list[str]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": copy.deepcopy(dict(properties)),
        "required": list(required),
    }


SEARCH_REPOSITORIES = ToolDescriptor(
    name="search_repositories",
    description="Search for GitHub repositories",
    input_schema=_object_schema(
        {
            "query": {"type": "string", "description": "Search query for repositories"},
            "sort": {
                "type": "string",
                "enum": ["stars", "forks", "updated"],
                "description": "Sort order for results",
                "default": "stars",
            },
            "per_page": _PER_PAGE,
        },
        ["query"],
    ),
)

GET_REPOSITORY = ToolDescriptor(
    name="get_repository",
    description="Get detailed information about a specific repository",
    input_schema=_object_schema({"owner": _OWNER, "repo": _REPO}, ["owner", "repo"]),
)

LIST_ISSUES = ToolDescriptor(
    name="list_issues",
    description="List issues in a repository",
    input_schema=_object_schema(
        {
            "owner": _OWNER,
            "repo": _REPO,
            "state": {
                "type": "string",
                "enum": ["open", "closed", "all"],
                "description": "Issue state",
                "default": "open",
            },
            "per_page": {**_PER_PAGE, "description": "Number of issues per page (max 100)"},
        },
        ["owner", "repo"],
    ),
)

CREATE_ISSUE = ToolDescriptor(
    name="create_issue",
    description="Create a new issue in a repository",
    input_schema=_object_schema(
        {
            "owner": _OWNER,
            "repo": _REPO,
            "title": {"type": "string", "description": "Issue title"},
            "body": {"type": "string", "description": "Issue body/description"},
            "labels": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Labels to assign to the issue",
                "default": [],
            },
        },
        ["owner", "repo", "title"],
    ),
)

SEARCH_CODE = ToolDescriptor(
    name="search_code",
    description="Search for code across GitHub repositories",
    input_schema=_object_schema(
        {
            "query": {"type": "string", "description": "Code search query"},
            "sort": {
                "type": "string",
                "enum": ["indexed", "best-match"],
                "description": "Sort order for results",
                "default": "indexed",
            },
            "per_page": _PER_PAGE,
        },
        ["query"],
    ),
)

GET_FILE_CONTENTS = ToolDescriptor(
    name="get_file_contents",
    description="Get the contents of a file or directory from a repository",
    input_schema=_object_schema(
        {
            "owner": _OWNER,
            "repo": _REPO,
            "path": {"type": "string", "description": "File path in the repository"},
            "ref": {
                "type": "string",
                "description": "Git reference (branch, tag, or commit SHA)",
                "default": "main",
            },
        },
        ["owner", "repo", "path"],
    ),
)


def _apply_defaults(schema: Mapping[str, Any], arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """Fill omitted optional fields with their declared defaults.

    Defaults are deep-copied so a mutable default (``labels: []``) is never
    shared between calls.
    """

    prepared = dict(arguments)
    for name, prop in (schema.get("properties") or {}).items():
        if name not in prepared and isinstance(prop, Mapping) and "default" in prop:
            prepared[name] = copy.deepcopy(prop["default"])
    return prepared


def _drop_undeclared(tool_name: str, schema: Mapping[str, Any], arguments: Mapping[str, Any]) -> Dict[str, Any]:
    declared = set((schema.get("properties") or {}).keys())
    extra = sorted(k for k in arguments if k not in declared)
    if extra:
        TOOLS_LOGGER.detailed(  # type: ignore[attr-defined]
            "Dropping undeclared arguments for %s: %s", tool_name, ", ".join(extra)
        )
    return {k: v for k, v in arguments.items() if k in declared}


def _validate_tool_args(tool_name: str, schema: Mapping[str, Any], arguments: Mapping[str, Any]) -> None:
    """Structural check only: required fields, types, enums and bounds."""

    validator_cls = jsonschema.validators.validator_for(schema)
    validator = validator_cls(schema)
    errors = sorted(validator.iter_errors(dict(arguments)), key=lambda e: [str(p) for p in e.absolute_path])
    if not errors:
        return

    first = errors[0]
    field = ".".join(str(p) for p in first.absolute_path) or None
    if field is None and first.validator == "required":
        # "'query' is a required property" carries the name in the message only.
        missing = [name for name in first.validator_value if name not in arguments]
        field = missing[0] if missing else None
    raise ToolInputValidationError(tool_name, first.message, field=field)


def _prepare_tool_args(descriptor: ToolDescriptor, arguments: Mapping[str, Any] | None) -> Dict[str, Any]:
    schema = descriptor.input_schema
    prepared = _apply_defaults(schema, arguments or {})
    prepared = _drop_undeclared(descriptor.name, schema, prepared)
    _validate_tool_args(descriptor.name, schema, prepared)
    return prepared


__all__ = [
    "CREATE_ISSUE",
    "GET_FILE_CONTENTS",
    "GET_REPOSITORY",
    "LIST_ISSUES",
    "SEARCH_CODE",
    "SEARCH_REPOSITORIES",
    "_apply_defaults",
    "_drop_undeclared",
    "_prepare_tool_args",
    "_validate_tool_args",
]
