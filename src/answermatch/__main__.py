"""
python -m answermatch

Module entrypoint for the CLI.
"""

from __future__ import annotations

from answermatch.cli import app

if __name__ == "__main__":
    app()
