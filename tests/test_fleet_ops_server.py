"""Fleet Ops MCP server unit testleri."""

import asyncio
import json
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from mcp_servers import fleet_ops_server


def _call(name: str, arguments: dict) -> dict:
    result = asyncio.run(fleet_ops_server.call_tool(name, arguments))
    return json.loads(result[0].text)


class TestTools:
    def test_list_tools(self):
        tools = asyncio.run(fleet_ops_server.list_tools())
        assert {t.name for t in tools} == {
            "get_inventory_status",
            "get_expiration_tier",
            "get_compliance_report",
            "get_maintenance_stats",
            "calculate_quote_totals",
            "get_expiring_credentials",
        }

    def test_quote_totals_tool(self):
        data = _call(
            "calculate_quote_totals",
            {
                "items": [{"quantity": 2, "unit_price": 50}, {"quantity": 1, "unit_price": 25}],
                "discount_type": "fixed",
                "discount_value": 25,
            },
        )
        assert data["success"] is True
        assert data["line_count"] == 2
        assert data["total_amount"] == pytest.approx(108.0)

    def test_quote_totals_bad_discount_type(self):
        data = _call("calculate_quote_totals", {"items": [], "discount_type": "coupon"})
        assert data["success"] is False

    def test_expiration_tier_tool(self):
        data = _call("get_expiration_tier", {"expiration_date": "2000-01-01"})
        assert data["tier"] == "severe"
        assert data["days_remaining"] < 0

    def test_expiration_tier_blank_date(self):
        data = _call("get_expiration_tier", {"expiration_date": ""})
        assert data["success"] is False
        assert "expiration_date" in data["error"]

    def test_inventory_status_uses_monitor(self, monkeypatch):
        monitor = MagicMock()
        monitor.inventory_report.return_value = {"total": 1, "inventory_value": Decimal("2.5")}
        monkeypatch.setattr(fleet_ops_server, "SpillKitInventoryMonitor", lambda **kw: monitor)

        data = _call("get_inventory_status", {})
        assert data == {"success": True, "data": {"total": 1, "inventory_value": 2.5}}

    def test_monitor_failure_reported(self, monkeypatch):
        def broken(**kwargs):
            raise RuntimeError("table missing")

        monkeypatch.setattr(fleet_ops_server, "MaintenanceHistoryMonitor", broken)
        data = _call("get_maintenance_stats", {"product_id": "P1"})
        assert data == {"success": False, "error": "table missing"}

    def test_unknown_tool(self):
        with pytest.raises(ValueError):
            asyncio.run(fleet_ops_server.call_tool("drop_tables", {}))
