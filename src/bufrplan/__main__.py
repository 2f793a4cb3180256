"""Module entrypoint for ``python -m bufrplan``."""

from __future__ import annotations

from bufrplan.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
