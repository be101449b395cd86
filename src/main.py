"""Script entry point.

Installed as the `comfy-catalog` console script; also runnable with
`python -m main` from `src/`.
"""

from __future__ import annotations

import sys

# Windows consoles default to cp1252; table borders and bullets need utf-8.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
