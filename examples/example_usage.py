"""Example: reconcile a day through the service layer (no Flask).

Controllers stay thin; the work happens in the services built by the container.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.attendance_engine.attendance_engine.attendance.serializers import record_to_dict
from src.attendance_engine.attendance_engine.container import EngineSettings, build_container
from src.attendance_engine.attendance_engine.overtime.service import summary_lines


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(EngineSettings.from_module(settings))

    events = [
        {"employeeId": "E-100", "deviceId": "gate-1", "timestamp": "2024-01-15T08:00:00", "workCode": 0, "confidenceScore": 97},
        {"employeeId": "E-100", "deviceId": "gate-1", "timestamp": "2024-01-15T12:00:00", "workCode": 4, "confidenceScore": 95},
        {"employeeId": "E-100", "deviceId": "gate-1", "timestamp": "2024-01-15T13:00:00", "workCode": 5, "confidenceScore": 95},
        {"employeeId": "E-100", "deviceId": "gate-1", "timestamp": "2024-01-15T19:00:00", "workCode": 1, "confidenceScore": 96},
    ]
    result = container.reconciliation_service.reconcile_day("E-100", date(2024, 1, 15), events)

    print(record_to_dict(result.record)["status"])
    print("\n".join(summary_lines(result.breakdown, label="2024-01-15")))


if __name__ == "__main__":
    main()
