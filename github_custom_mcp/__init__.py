"""GitHub tools exposed over the Model Context Protocol.

The stable import surface lives in ``github_custom_mcp.server``; this package
root stays import-light so ``config`` can be loaded on its own (the CLI does).
"""

from __future__ import annotations

from github_custom_mcp.config import SERVER_NAME, SERVER_VERSION

__version__ = SERVER_VERSION

__all__ = ["SERVER_NAME", "__version__"]
