"""Example: drive the service layer without Flask.

Controllers are a thin layer; the check-in/out rules live in the services.
"""

import importlib

from config import get_settings_module

from src.library_system.library_system.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    snapshot = container.attendance_service.get_snapshot(user_id=1, limit=5)
    print("checked in:", snapshot.is_checked_in)
    print(container.attendance_service.get_history_ui(user_id=1))
    print(container.occupancy_service.snapshot())


if __name__ == "__main__":
    main()
