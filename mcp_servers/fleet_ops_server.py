"""
Fleet Ops MCP Server

Provides tools for spill kit stock status, unit cleaning compliance, maintenance
history statistics, quote totals and driver credential expirations.
Reads records from DynamoDB; derived values are never written back.
"""

import json
import logging
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import boto3
from decimal import Decimal
from typing import Dict, List, Optional
from mcp.server import Server
from mcp.types import Tool, TextContent

from fleetops import config
from fleetops.models.records import DiscountType, QuoteLineItem, QuoteTerms, parse_timestamp
from fleetops.monitors import (
    ComplianceMonitor,
    DriverComplianceMonitor,
    MaintenanceHistoryMonitor,
    SpillKitInventoryMonitor,
)
from fleetops.rules.quotes import quote_totals
from fleetops.rules.stock import days_until, expiration_tier

logger = logging.getLogger("fleet-ops")

app = Server("fleet-ops")

dynamodb = boto3.resource("dynamodb", region_name=config.REGION)


def _to_json(obj):
    if isinstance(obj, Decimal):
        return int(obj) if obj == int(obj) else float(obj)
    if isinstance(obj, dict):
        return {k: _to_json(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_json(i) for i in obj]
    return obj


def _result(data):
    return [TextContent(type="text", text=json.dumps(_to_json(data), indent=2, ensure_ascii=False, default=str))]


@app.list_tools()
async def list_tools() -> List[Tool]:
    return [
        Tool(name="get_inventory_status", description="Classify every spill kit inventory item by stock status and list shortages",
             inputSchema={"type": "object", "properties": {}}),
        Tool(name="get_expiration_tier", description="Bucket an expiration date by days remaining (severe/warning/caution/neutral)",
             inputSchema={"type": "object", "properties": {
                 "expiration_date": {"type": "string", "description": "ISO 8601 date"}
             }, "required": ["expiration_date"]}),
        Tool(name="get_compliance_report", description="Cleaning compliance status per unit for a product",
             inputSchema={"type": "object", "properties": {
                 "product_id": {"type": "string", "default": "all"}
             }}),
        Tool(name="get_maintenance_stats", description="Completed maintenance session statistics for a product",
             inputSchema={"type": "object", "properties": {
                 "product_id": {"type": "string", "default": "all"}
             }}),
        Tool(name="calculate_quote_totals", description="Calculate subtotal, discount, tax and total for quote line items",
             inputSchema={"type": "object", "properties": {
                 "items": {"type": "array", "items": {"type": "object", "properties": {
                     "description": {"type": "string"}, "quantity": {"type": "integer"}, "unit_price": {"type": "number"}
                 }, "required": ["quantity", "unit_price"]}},
                 "discount_type": {"type": "string", "enum": ["percentage", "fixed"], "default": "percentage"},
                 "discount_value": {"type": "number", "default": 0},
                 "additional_fees": {"type": "number", "default": 0}
             }, "required": ["items"]}),
        Tool(name="get_expiring_credentials", description="Driver licenses, medical cards and trainings expiring within 90 days",
             inputSchema={"type": "object", "properties": {}}),
    ]


@app.call_tool()
async def call_tool(name: str, arguments: dict) -> List[TextContent]:
    handlers = {
        "get_inventory_status": lambda a: get_inventory_status(),
        "get_expiration_tier": lambda a: get_expiration_tier(a["expiration_date"]),
        "get_compliance_report": lambda a: get_compliance_report(a.get("product_id", "all")),
        "get_maintenance_stats": lambda a: get_maintenance_stats(a.get("product_id", "all")),
        "calculate_quote_totals": lambda a: calculate_quote_totals(
            a["items"], a.get("discount_type", "percentage"), a.get("discount_value", 0), a.get("additional_fees", 0)),
        "get_expiring_credentials": lambda a: get_expiring_credentials(),
    }
    handler = handlers.get(name)
    if not handler:
        raise ValueError(f"Unknown tool: {name}")
    return _result(handler(arguments))


# --- Implementation ---

def get_inventory_status() -> Dict:
    try:
        report = SpillKitInventoryMonitor(dynamodb_resource=dynamodb).inventory_report()
        return {"success": True, "data": report}
    except Exception as e:
        logger.error("get_inventory_status failed: %s", e)
        return {"success": False, "error": str(e)}


def get_expiration_tier(expiration_date: str) -> Dict:
    try:
        expiry = parse_timestamp(expiration_date)
        if expiry is None:
            return {"success": False, "error": "expiration_date is required"}
        return {
            "success": True,
            "expiration_date": expiry.isoformat(),
            "days_remaining": days_until(expiry),
            "tier": expiration_tier(expiry).value,
        }
    except ValueError as e:
        return {"success": False, "error": str(e)}


def get_compliance_report(product_id: str = "all") -> Dict:
    try:
        report = ComplianceMonitor(dynamodb_resource=dynamodb).compliance_report(product_id)
        return {"success": True, "data": report}
    except Exception as e:
        logger.error("get_compliance_report failed: %s", e)
        return {"success": False, "error": str(e)}


def get_maintenance_stats(product_id: str = "all") -> Dict:
    try:
        report = MaintenanceHistoryMonitor(dynamodb_resource=dynamodb).history_report(product_id)
        return {"success": True, "data": report}
    except Exception as e:
        logger.error("get_maintenance_stats failed: %s", e)
        return {"success": False, "error": str(e)}


def calculate_quote_totals(items: List[Dict], discount_type: str = "percentage",
                           discount_value: float = 0, additional_fees: float = 0) -> Dict:
    try:
        lines = [
            QuoteLineItem(description=i.get("description", ""), quantity=int(i["quantity"]),
                          unit_price=float(i["unit_price"]))
            for i in items
        ]
        terms = QuoteTerms(discount_type=DiscountType(discount_type),
                           discount_value=float(discount_value), additional_fees=float(additional_fees))
        totals = quote_totals(lines, terms)
        return {"success": True, "line_count": len(lines), **totals.to_dict()}
    except (KeyError, ValueError) as e:
        return {"success": False, "error": str(e)}


def get_expiring_credentials() -> Dict:
    try:
        report = DriverComplianceMonitor(dynamodb_resource=dynamodb).expiration_report()
        return {"success": True, "count": len(report["items"]), "data": report}
    except Exception as e:
        logger.error("get_expiring_credentials failed: %s", e)
        return {"success": False, "error": str(e)}


if __name__ == "__main__":
    import asyncio
    from mcp.server.stdio import stdio_server

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")

    async def run():
        async with stdio_server() as (read, write):
            await app.run(read, write, app.create_initialization_options())

    asyncio.run(run())
