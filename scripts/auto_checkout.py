"""Close visits left open after closing time.

Meant for cron, e.g. every 15 minutes. Does nothing unless
"Auto check-out at closing time" is enabled in the admin settings.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.library_system.library_system.container import build_container


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG))

    library = container.settings_service.get()
    if not library.auto_checkout_enabled:
        print("SKIP: auto check-out is disabled")
        return 0

    closed = container.attendance_service.auto_checkout(closing_time=library.closing_time)
    print(f"OK: closed {closed} open visit(s) at {library.closing_time.strftime('%H:%M')}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
