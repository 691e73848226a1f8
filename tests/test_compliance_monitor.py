"""Compliance Monitor unit testleri."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

from boto3.dynamodb.conditions import Key

from fleetops import config
from fleetops.monitors.compliance_monitor import (
    PRODUCT_ITEMS_TABLE,
    SANITATION_LOGS_TABLE,
    ComplianceMonitor,
)

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def _create_resource() -> MagicMock:
    resource = MagicMock()
    tables: dict[str, MagicMock] = {}
    resource.Table.side_effect = lambda name: tables.setdefault(name, MagicMock(name=name))
    return resource


def _create_monitor():
    resource = _create_resource()
    monitor = ComplianceMonitor(dynamodb_resource=resource)
    items_table = resource.Table(config.table_name(PRODUCT_ITEMS_TABLE))
    logs_table = resource.Table(config.table_name(SANITATION_LOGS_TABLE))
    return monitor, items_table, logs_table


def _ts(delta: timedelta) -> str:
    return (NOW - delta).isoformat()


class TestComplianceReport:
    def test_report_counts(self):
        monitor, items_table, logs_table = _create_monitor()
        items_table.scan.return_value = {
            "Items": [
                {"item_id": "U2", "item_code": "PT-002"},
                {"item_id": "U1", "item_code": "PT-001"},
                {"item_id": "U3", "item_code": "PT-003"},
            ]
        }
        # Üniteler item_code sırasıyla sorgulanır: U1, U2, U3
        logs_table.query.side_effect = [
            {
                "Items": [
                    {"log_id": "L1", "product_item_id": "U1", "created_at": _ts(timedelta(days=2))},
                    {"log_id": "L2", "product_item_id": "U1", "created_at": _ts(timedelta(days=9))},
                ]
            },
            {"Items": [{"log_id": "L3", "product_item_id": "U2", "created_at": _ts(timedelta(days=8))}]},
            {"Items": []},
        ]

        report = monitor.compliance_report(now=NOW)

        assert [u["item_code"] for u in report["units"]] == ["PT-001", "PT-002", "PT-003"]
        assert [u["status"] for u in report["units"]] == ["good", "overdue", "no_record"]
        assert report["counts"]["total"] == 3
        assert monitor.get_reports()[0].summary["overdue"] == 1

    def test_logs_queried_per_unit_on_index(self):
        monitor, items_table, logs_table = _create_monitor()
        items_table.scan.return_value = {
            "Items": [{"item_id": "U1", "item_code": "PT-001"}, {"item_id": "U2", "item_code": "PT-002"}]
        }
        logs_table.query.return_value = {"Items": []}

        monitor.compliance_report(now=NOW)

        assert logs_table.query.call_count == 2
        kwargs = logs_table.query.call_args_list[0].kwargs
        assert kwargs["IndexName"] == "ItemTimeIndex"
        expected = Key("product_item_id").eq("U1") & Key("created_at").gte(
            (NOW - timedelta(days=90)).isoformat()
        )
        assert kwargs["KeyConditionExpression"] == expected
        logs_table.scan.assert_not_called()

    def test_product_filter_uses_index(self):
        monitor, items_table, logs_table = _create_monitor()
        items_table.query.return_value = {"Items": []}

        report = monitor.compliance_report(product_id="P1", now=NOW)

        assert items_table.query.call_args.kwargs["IndexName"] == "ProductIndex"
        logs_table.query.assert_not_called()
        assert report["counts"]["total"] == 0

    def test_custom_frequency_from_config(self):
        monitor, items_table, logs_table = _create_monitor()
        monitor.config.cleaning_frequency_days = 14
        items_table.scan.return_value = {"Items": [{"item_id": "U1", "item_code": "PT-001"}]}
        logs_table.query.return_value = {
            "Items": [{"log_id": "L1", "product_item_id": "U1", "created_at": _ts(timedelta(days=9))}]
        }
        report = monitor.compliance_report(now=NOW)
        assert report["units"][0]["status"] == "good"


class TestMarkCleaned:
    def test_inserts_log(self):
        monitor, _, logs_table = _create_monitor()
        entry = monitor.mark_cleaned("U1")
        logs_table.put_item.assert_called_once()
        assert logs_table.put_item.call_args.kwargs["Item"]["product_item_id"] == "U1"
        assert entry["log_id"]
