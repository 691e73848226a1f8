"""Driver Compliance Monitor unit testleri."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

from fleetops import config
from fleetops.monitors.driver_monitor import (
    CREDENTIALS_TABLE,
    TRAINING_TABLE,
    DriverComplianceMonitor,
)

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def _create_monitor() -> DriverComplianceMonitor:
    resource = MagicMock()
    tables: dict[str, MagicMock] = {}
    resource.Table.side_effect = lambda name: tables.setdefault(name, MagicMock(name=name))

    resource.Table(config.table_name(CREDENTIALS_TABLE)).scan.return_value = {
        "Items": [
            {
                "driver_id": "D1",
                "driver_name": "Sam Ortiz",
                "license_expiry_date": "2025-06-25",
                "medical_card_expiry_date": "2026-06-01",
            },
            {"driver_id": "D2", "driver_name": "Lee Park", "license_expiry_date": "2025-06-01"},
        ]
    }
    resource.Table(config.table_name(TRAINING_TABLE)).scan.return_value = {
        "Items": [
            {"driver_id": "D1", "driver_name": "Sam Ortiz", "training_type": "HAZMAT", "next_due": "2025-08-01"},
            {"driver_id": "D2", "driver_name": "Lee Park", "training_type": "Defensive Driving"},
        ]
    }
    return DriverComplianceMonitor(dynamodb_resource=resource)


class TestExpirationReport:
    def test_items_within_horizon_sorted(self):
        monitor = _create_monitor()
        report = monitor.expiration_report(NOW)

        assert [(i["driver_id"], i["item_type"]) for i in report["items"]] == [
            ("D2", "license"),
            ("D1", "license"),
            ("D1", "training"),
        ]
        assert report["counts"] == {
            "overdue": 1,
            "expiring_30": 1,
            "expiring_60": 1,
            "expiring_90": 0,
        }

    def test_training_status_report(self):
        monitor = _create_monitor()
        rows = monitor.training_status_report(NOW)
        statuses = {r["training_type"]: r["status"] for r in rows}
        assert statuses == {"HAZMAT": "current", "Defensive Driving": "completed"}

    def test_process(self):
        result = _create_monitor().process(NOW)
        assert result["counts"]["overdue"] == 1
