"""Run script.

Why it exists:
- Lets the CLI run with `python -m main` from inside `src/` during development.
- Keeps a plain entry point next to the `sw3` console script.
"""

from __future__ import annotations

import sys

# Windows terminals default to cp1252; agent output is UTF-8.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
