"""Compliance Monitor - Ünite temizlik uyumluluğunu izler.

Son 90 günün sanitasyon kayıtlarını ünitelerle birleştirir ve her üniteyi
good / due_soon / overdue / no_record olarak sınıflandırır.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from boto3.dynamodb.conditions import Key

from fleetops import config
from fleetops.models.records import SanitationLog
from fleetops.monitors.base_monitor import BaseMonitor
from fleetops.rules.compliance import build_compliance_units, summarize_compliance

logger = logging.getLogger(__name__)

PRODUCT_ITEMS_TABLE = "ProductItems"
SANITATION_LOGS_TABLE = "SanitationLogs"
LOG_INDEX = "ItemTimeIndex"

LOG_LOOKBACK_DAYS = 90


class ComplianceMonitor(BaseMonitor):
    """Ünite bazlı temizlik uyumluluğunu raporlayan izleyici."""

    def __init__(self, region_name: str = config.REGION, **kwargs: Any):
        super().__init__(
            monitor_name="ComplianceMonitor",
            region_name=region_name,
            **kwargs,
        )

    def load_units(self, product_id: str = "all") -> list[dict]:
        """Ürüne ait üniteleri item_code sırasıyla döndürür."""
        if product_id == "all":
            rows = self.scan_all(PRODUCT_ITEMS_TABLE)
        else:
            rows = self.query_all(
                PRODUCT_ITEMS_TABLE,
                IndexName="ProductIndex",
                KeyConditionExpression=Key("product_id").eq(product_id),
            )
        rows.sort(key=lambda r: r.get("item_code", ""))
        return rows

    def load_logs(
        self, item_ids: list[str], now: Optional[datetime] = None
    ) -> list[SanitationLog]:
        """Verilen ünitelerin son 90 gündeki sanitasyon kayıtları.

        Her ünite için ItemTimeIndex üzerinde ayrı bir sorgu yapılır.
        """
        ref = now or datetime.now(timezone.utc)
        since = (ref - timedelta(days=LOG_LOOKBACK_DAYS)).isoformat()

        logs = []
        for item_id in item_ids:
            rows = self.query_all(
                SANITATION_LOGS_TABLE,
                IndexName=LOG_INDEX,
                KeyConditionExpression=(
                    Key("product_item_id").eq(item_id) & Key("created_at").gte(since)
                ),
            )
            logs.extend(SanitationLog.from_row(row) for row in rows)
        return logs

    def compliance_report(self, product_id: str = "all", now: Optional[datetime] = None) -> dict:
        ref = now or datetime.now(timezone.utc)
        units = self.load_units(product_id)
        logs = self.load_logs([u["item_id"] for u in units], ref)

        compliance_units = build_compliance_units(
            units, logs, self.config.cleaning_frequency_days
        )
        report = summarize_compliance(compliance_units, ref, self.config.due_soon_window)
        report["product_id"] = product_id

        self.record_report("compliance", {"product_id": product_id, **report["counts"]})
        return report

    def mark_cleaned(self, item_id: str, notes: str = "Quick cleaned from Inventory > Compliance") -> dict:
        """Ünite için yeni sanitasyon kaydı ekler."""
        entry = {
            "log_id": str(uuid.uuid4()),
            "product_item_id": item_id,
            "notes": notes,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self.table(SANITATION_LOGS_TABLE).put_item(Item=entry)
        logger.info("Temizlik kaydı eklendi: %s", item_id)
        return entry

    def process(self, product_id: str = "all", now: Optional[datetime] = None) -> dict:
        report = self.compliance_report(product_id, now)
        return {
            "monitor": self.monitor_name,
            "product_id": product_id,
            "counts": report["counts"],
        }
