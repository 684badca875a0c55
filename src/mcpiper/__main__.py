"""Module entry point so ``python -m mcpiper`` runs the live viewer."""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
