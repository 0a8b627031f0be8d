from __future__ import annotations

import importlib
import sys
from types import ModuleType


def _main() -> ModuleType:
    """The root ``main`` module.

    Handlers reach ``_github_request`` through it at call time, so replacing
    ``main._github_request`` swaps the transport for every tool.
    """

    module = sys.modules.get("main")
    if module is None:
        module = importlib.import_module("main")
    return module
