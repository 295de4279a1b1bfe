"""Start the dashboard from a source checkout, e.g. ``python run_app.py --api-url http://erp:8000/api``."""

from __future__ import annotations

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from springops.app import main  # noqa: E402


if __name__ in {"__main__", "__mp_main__"}:
    main(sys.argv[1:])
