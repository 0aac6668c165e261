from __future__ import annotations

# Modules that run code on import, never scanned.
DEFAULT_IGNORES = {
    "__main__",
    "conftest",
    "setup",
}


def should_ignore_module(module_name: str) -> bool:
    return module_name.rpartition(".")[2] in DEFAULT_IGNORES
