"""Sürücü eğitim ve belge geçerlilik takibi."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from fleetops.models.records import (
    CredentialRecord,
    ExpiryWindow,
    TrainingRecord,
    TrainingStatus,
)

TRAINING_DUE_SOON_DAYS = 30
EXPIRY_HORIZON_DAYS = 90


def training_status(
    next_due: Optional[datetime],
    now: Optional[datetime] = None,
    due_soon_days: int = TRAINING_DUE_SOON_DAYS,
) -> TrainingStatus:
    """Eğitim kaydının durumu. Sonraki tarih yoksa eğitim tamamlanmış sayılır."""
    if next_due is None:
        return TrainingStatus.COMPLETED

    ref = now if now is not None else datetime.now(timezone.utc)
    if next_due < ref:
        return TrainingStatus.OVERDUE
    if next_due <= ref + timedelta(days=due_soon_days):
        return TrainingStatus.DUE_SOON
    return TrainingStatus.CURRENT


def training_report(
    records: Iterable[TrainingRecord],
    now: Optional[datetime] = None,
    due_soon_days: int = TRAINING_DUE_SOON_DAYS,
) -> list[dict]:
    ref = now if now is not None else datetime.now(timezone.utc)
    return [
        {
            "driver_id": record.driver_id,
            "driver_name": record.driver_name,
            "training_type": record.training_type,
            "next_due": record.next_due.isoformat() if record.next_due else None,
            "status": training_status(record.next_due, ref, due_soon_days).value,
        }
        for record in records
    ]


def days_between(expiry: datetime, now: datetime) -> int:
    """Tam gün farkı; sıfıra doğru kesilir."""
    return int((expiry - now).total_seconds() / (60 * 60 * 24))


def expiry_window(days_until: int) -> ExpiryWindow:
    if days_until < 0:
        return ExpiryWindow.OVERDUE
    if days_until <= 30:
        return ExpiryWindow.EXPIRING_30
    if days_until <= 60:
        return ExpiryWindow.EXPIRING_60
    return ExpiryWindow.EXPIRING_90


def expiration_items(
    records: Iterable[CredentialRecord],
    now: Optional[datetime] = None,
    horizon_days: int = EXPIRY_HORIZON_DAYS,
) -> list[dict]:
    """Ufuk içinde süresi dolan belgeleri kalan güne göre sıralı döndürür."""
    ref = now if now is not None else datetime.now(timezone.utc)
    items = []
    for record in records:
        if record.expiry_date is None:
            continue
        days = days_between(record.expiry_date, ref)
        if days > horizon_days:
            continue
        items.append(
            {
                "driver_id": record.driver_id,
                "driver_name": record.driver_name,
                "item_type": record.item_type,
                "item_name": record.item_name,
                "expiry_date": record.expiry_date.isoformat(),
                "status": expiry_window(days).value,
                "days_until_expiry": days,
            }
        )
    items.sort(key=lambda i: i["days_until_expiry"])
    return items


def expiry_counts(items: Iterable[dict]) -> dict[str, int]:
    counts = {window.value: 0 for window in ExpiryWindow}
    for item in items:
        counts[item["status"]] += 1
    return counts
