"""Entry point for ``python -m btrpc``."""

from __future__ import annotations

from btrpc.cli.main import main

if __name__ == "__main__":
    main()
