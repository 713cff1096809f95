"""Example: drive the service layer without Flask.

Controllers stay thin; this recomputes the current month's salaries and prints
the admin's active QR session straight from the services.
"""

import importlib

from config import get_settings_module

from src.library_attendance.library_attendance.common.datetime_utils import now_local
from src.library_attendance.library_attendance.container import ContainerOptions, build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, options=ContainerOptions.from_settings(settings))
    try:
        month = now_local().strftime("%Y-%m")
        for record in container.payroll_service.calculate(month):
            print(record)
        print(container.qr_session_service.get_active_session_for_issuer(1))
    finally:
        container.conn.close()


if __name__ == "__main__":
    main()
