"""Temizlik uyumluluğu (sanitasyon) takibi."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from fleetops.models.records import ComplianceStatus, ComplianceUnit, SanitationLog

DEFAULT_FREQUENCY_DAYS = 7
# Pencere temizlik sıklığından bağımsız olarak sabittir
DUE_SOON_WINDOW = timedelta(days=1)


def classify_cleaning(
    last_cleaned_at: Optional[datetime],
    now: Optional[datetime] = None,
    frequency_days: int = DEFAULT_FREQUENCY_DAYS,
    due_soon_window: timedelta = DUE_SOON_WINDOW,
) -> ComplianceStatus:
    """Son temizlik zamanına göre ünitenin uyumluluk durumunu döndürür."""
    if last_cleaned_at is None:
        return ComplianceStatus.NO_RECORD

    ref = now if now is not None else datetime.now(timezone.utc)
    next_due = last_cleaned_at + timedelta(days=frequency_days)

    if ref >= next_due:
        return ComplianceStatus.OVERDUE
    if next_due - ref <= due_soon_window:
        return ComplianceStatus.DUE_SOON
    return ComplianceStatus.GOOD


def latest_cleaning_by_item(logs: Iterable[SanitationLog]) -> dict[str, SanitationLog]:
    """Her ünite için en son sanitasyon kaydını döndürür.

    Ünite referansı olmayan kayıtlar atlanır.
    """
    latest: dict[str, SanitationLog] = {}
    for log in sorted(logs, key=lambda entry: entry.created_at, reverse=True):
        if not log.product_item_id:
            continue
        latest.setdefault(log.product_item_id, log)
    return latest


def build_compliance_units(
    items: Iterable[dict],
    logs: Iterable[SanitationLog],
    frequency_days: int = DEFAULT_FREQUENCY_DAYS,
) -> list[ComplianceUnit]:
    """Ünite satırlarını son temizlik kayıtlarıyla birleştirir."""
    latest = latest_cleaning_by_item(logs)
    units = []
    for item in items:
        last_log = latest.get(item["item_id"])
        units.append(
            ComplianceUnit(
                item_id=item["item_id"],
                item_code=item.get("item_code", ""),
                last_cleaned_at=last_log.created_at if last_log else None,
                cleaning_frequency_days=frequency_days,
            )
        )
    return units


def summarize_compliance(
    units: Iterable[ComplianceUnit],
    now: Optional[datetime] = None,
    due_soon_window: timedelta = DUE_SOON_WINDOW,
) -> dict:
    """Ünite bazlı durum listesi ve toplam sayıları üretir."""
    ref = now if now is not None else datetime.now(timezone.utc)
    rows = []
    for unit in units:
        status = classify_cleaning(
            unit.last_cleaned_at, ref, unit.cleaning_frequency_days, due_soon_window
        )
        rows.append(
            {
                "item_id": unit.item_id,
                "item_code": unit.item_code,
                "last_cleaned_at": unit.last_cleaned_at.isoformat() if unit.last_cleaned_at else None,
                "next_due_at": unit.next_due_at.isoformat() if unit.next_due_at else None,
                "status": status.value,
            }
        )

    counts = {status.value: 0 for status in ComplianceStatus}
    for row in rows:
        counts[row["status"]] += 1
    counts["total"] = len(rows)

    return {"units": rows, "counts": counts}
