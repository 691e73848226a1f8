"""Maintenance History Monitor - Tamamlanan bakım oturumlarını özetler."""

from __future__ import annotations

import logging
from typing import Any, Optional

from boto3.dynamodb.conditions import Attr

from fleetops import config
from fleetops.models.records import MaintenanceSession
from fleetops.monitors.base_monitor import BaseMonitor
from fleetops.rules.maintenance import (
    cost_by_technician,
    maintenance_stats,
    session_duration_days,
)

logger = logging.getLogger(__name__)

SESSIONS_TABLE = "MaintenanceSessions"
PRODUCT_ITEMS_TABLE = "ProductItems"

_UNSET = object()


class MaintenanceHistoryMonitor(BaseMonitor):
    """Bakım geçmişi istatistiklerini üreten izleyici."""

    def __init__(self, region_name: str = config.REGION, **kwargs: Any):
        super().__init__(
            monitor_name="MaintenanceHistoryMonitor",
            region_name=region_name,
            **kwargs,
        )
        self.items_table = self.table(PRODUCT_ITEMS_TABLE)

    def _load_item(self, item_id: str) -> dict:
        response = self.items_table.get_item(Key={"item_id": item_id})
        return response.get("Item") or {}

    def load_completed_sessions(
        self, product_id: str = "all", limit: Any = _UNSET
    ) -> list[MaintenanceSession]:
        """Tamamlanmış oturumları ünitenin güncel durumuyla birleştirir.

        En yeni tamamlananlar önce gelir. ``limit=None`` tüm oturumları döndürür.
        """
        if limit is _UNSET:
            limit = self.config.maintenance_history_limit

        rows = self.scan_all(SESSIONS_TABLE, Attr("status").eq("completed"))
        rows.sort(key=lambda r: r.get("completed_at") or "", reverse=True)

        item_cache: dict[str, dict] = {}
        sessions = []
        for row in rows:
            item_id = row.get("item_id", "")
            if item_id not in item_cache:
                item_cache[item_id] = self._load_item(item_id) if item_id else {}
            item = item_cache[item_id]

            if not item:
                logger.warning("Oturum ünitesi bulunamadı, atlanıyor: %s", row.get("session_id"))
                continue
            if product_id != "all" and item.get("product_id") != product_id:
                continue

            joined = dict(row)
            joined.setdefault("item_code", item.get("item_code", ""))
            joined.setdefault("product_name", item.get("product_name"))
            sessions.append(MaintenanceSession.from_row(joined, item_status=item.get("status", "")))

            if limit is not None and len(sessions) >= limit:
                break

        return sessions

    def history_report(
        self,
        product_id: str = "all",
        sessions: Optional[list[MaintenanceSession]] = None,
    ) -> dict:
        """Özet istatistikler, teknisyen grupları ve son oturum listesi."""
        if sessions is None:
            sessions = self.load_completed_sessions(product_id)

        stats = maintenance_stats(sessions)
        recent = [
            {
                "session_id": s.session_id,
                "item_id": s.item_id,
                "item_code": s.item_code,
                "session_number": s.session_number,
                "product_name": s.product_name,
                "completed_at": s.completed_at.isoformat() if s.completed_at else None,
                "duration_days": session_duration_days(s.started_at, s.completed_at),
                "total_cost": s.total_cost,
                "primary_technician": s.primary_technician,
                "session_summary": s.session_summary or "No summary provided",
            }
            for s in sessions
        ]

        self.record_report("maintenance_history", {"product_id": product_id, **stats.to_dict()})
        return {
            "product_id": product_id,
            "stats": stats.to_dict(),
            "by_technician": cost_by_technician(sessions),
            "sessions": recent,
        }

    def process(self, product_id: str = "all") -> dict:
        report = self.history_report(product_id)
        return {"monitor": self.monitor_name, **report["stats"]}
