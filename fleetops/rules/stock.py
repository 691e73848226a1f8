"""Stok durumu ve son kullanma tarihi sınıflandırması.

Sınıflandırma sıralı bir (koşul, etiket) listesi üzerinden yapılır; ilk
eşleşen kural kazanır. Kural sırası önceliktir.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from fleetops.models.records import ExpirationTier, InventoryItem, StockStatus

logger = logging.getLogger(__name__)

StockRule = tuple[Callable[[InventoryItem, datetime], bool], StockStatus]

STOCK_RULES: list[StockRule] = [
    (
        lambda item, now: item.expiration_date is not None and item.expiration_date < now,
        StockStatus.EXPIRED,
    ),
    (lambda item, now: item.is_critical and item.current_stock == 0, StockStatus.CRITICAL_MISSING),
    (lambda item, now: item.current_stock == 0, StockStatus.OUT_OF_STOCK),
    (lambda item, now: item.current_stock <= item.minimum_threshold, StockStatus.LOW_STOCK),
]

# Eksik stok uyarısı gerektiren durumlar
SHORTAGE_STATUSES = frozenset(
    {StockStatus.LOW_STOCK, StockStatus.OUT_OF_STOCK, StockStatus.CRITICAL_MISSING}
)

MS_PER_DAY = 1000 * 60 * 60 * 24


def _now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def classify_stock(item: InventoryItem, now: Optional[datetime] = None) -> StockStatus:
    """Bir envanter kalemini tek bir stok durumuna eşler."""
    ref = _now(now)
    for predicate, status in STOCK_RULES:
        if predicate(item, ref):
            return status
    return StockStatus.IN_STOCK


def days_until(target: datetime, now: Optional[datetime] = None) -> int:
    """Hedef tarihe kalan gün sayısı (milisaniye farkı, aşağı yuvarlanır).

    23 saat 59 dakika kalan bir tarih 0 gün döner.
    """
    diff_ms = (target - _now(now)).total_seconds() * 1000
    return math.floor(diff_ms / MS_PER_DAY)


def expiration_tier(
    expiration_date: Optional[datetime], now: Optional[datetime] = None
) -> ExpirationTier:
    """Son kullanma tarihine yakınlığa göre renk kademesi döndürür."""
    if expiration_date is None:
        return ExpirationTier.NEUTRAL

    days = days_until(expiration_date, now)
    if days < 0:
        return ExpirationTier.SEVERE
    if days <= 30:
        return ExpirationTier.WARNING
    if days <= 60:
        return ExpirationTier.CAUTION
    return ExpirationTier.NEUTRAL


def summarize_stock(items: Iterable[InventoryItem], now: Optional[datetime] = None) -> dict:
    """Envanter listesi için durum sayıları ve eksik stok listesi üretir."""
    ref = _now(now)
    counts = {status.value: 0 for status in StockStatus}
    rows = []
    shortages = []
    inventory_value = 0.0

    for item in items:
        status = classify_stock(item, ref)
        counts[status.value] += 1
        inventory_value += item.current_stock * item.unit_cost
        if item.current_stock < 0:
            logger.warning("Negatif stok: %s = %s", item.item_id, item.current_stock)

        row = {
            "item_id": item.item_id,
            "item_name": item.item_name,
            "current_stock": item.current_stock,
            "minimum_threshold": item.minimum_threshold,
            "status": status.value,
            "expiration_tier": expiration_tier(item.expiration_date, ref).value,
        }
        rows.append(row)
        if status in SHORTAGE_STATUSES:
            shortages.append(row)

    return {
        "total": len(rows),
        "counts": counts,
        "items": rows,
        "low_stock_items": shortages,
        "inventory_value": round(inventory_value, 2),
    }
