"""Module entrypoint for running entryscope as ``python -m entryscope``."""

from __future__ import annotations

from entryscope.cli import main


if __name__ == "__main__":
    main()
