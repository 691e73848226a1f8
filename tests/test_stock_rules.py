"""Stok durumu ve son kullanma kademesi unit testleri."""

from datetime import datetime, timedelta, timezone

from fleetops.models.records import ExpirationTier, InventoryItem, StockStatus
from fleetops.rules.stock import (
    STOCK_RULES,
    classify_stock,
    days_until,
    expiration_tier,
    summarize_stock,
)

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def _item(stock: int, threshold: int = 5, critical: bool = False, expires=None, **kwargs) -> InventoryItem:
    return InventoryItem(
        item_id=kwargs.pop("item_id", "ITEM001"),
        item_name=kwargs.pop("item_name", "Absorbent Pads"),
        current_stock=stock,
        minimum_threshold=threshold,
        is_critical=critical,
        expiration_date=expires,
        **kwargs,
    )


class TestStockClassification:
    """Kurallar sırayla değerlendirilir, ilk eşleşen kazanır."""

    def test_expired_overrides_everything(self):
        item = _item(50, threshold=5, critical=True, expires=NOW - timedelta(days=1))
        assert classify_stock(item, NOW) == StockStatus.EXPIRED

    def test_expired_zero_stock_critical_is_still_expired(self):
        item = _item(0, critical=True, expires=NOW - timedelta(seconds=1))
        assert classify_stock(item, NOW) == StockStatus.EXPIRED

    def test_expiration_exactly_now_is_not_expired(self):
        item = _item(50, expires=NOW)
        assert classify_stock(item, NOW) == StockStatus.IN_STOCK

    def test_critical_missing(self):
        assert classify_stock(_item(0, critical=True), NOW) == StockStatus.CRITICAL_MISSING

    def test_critical_with_stock_is_low_stock(self):
        assert classify_stock(_item(1, critical=True), NOW) == StockStatus.LOW_STOCK

    def test_critical_at_threshold_is_low_stock(self):
        assert classify_stock(_item(5, threshold=5, critical=True), NOW) == StockStatus.LOW_STOCK

    def test_out_of_stock(self):
        assert classify_stock(_item(0), NOW) == StockStatus.OUT_OF_STOCK

    def test_low_stock_at_threshold(self):
        assert classify_stock(_item(5, threshold=5), NOW) == StockStatus.LOW_STOCK

    def test_in_stock_above_threshold(self):
        assert classify_stock(_item(6, threshold=5), NOW) == StockStatus.IN_STOCK

    def test_future_expiration_does_not_change_status(self):
        item = _item(20, expires=NOW + timedelta(days=10))
        assert classify_stock(item, NOW) == StockStatus.IN_STOCK

    def test_rule_order(self):
        labels = [label for _, label in STOCK_RULES]
        assert labels == [
            StockStatus.EXPIRED,
            StockStatus.CRITICAL_MISSING,
            StockStatus.OUT_OF_STOCK,
            StockStatus.LOW_STOCK,
        ]

    def test_classification_is_idempotent(self):
        item = _item(3)
        assert classify_stock(item, NOW) == classify_stock(item, NOW)


class TestExpirationTier:
    """Kalan gün aşağı yuvarlanır."""

    def test_no_date_is_neutral(self):
        assert expiration_tier(None, NOW) == ExpirationTier.NEUTRAL

    def test_past_is_severe(self):
        assert expiration_tier(NOW - timedelta(hours=1), NOW) == ExpirationTier.SEVERE

    def test_almost_one_day_is_zero_days(self):
        expiry = NOW + timedelta(hours=23, minutes=59)
        assert days_until(expiry, NOW) == 0
        assert expiration_tier(expiry, NOW) == ExpirationTier.WARNING

    def test_thirty_days_twenty_three_hours_is_warning(self):
        expiry = NOW + timedelta(days=30, hours=23)
        assert days_until(expiry, NOW) == 30
        assert expiration_tier(expiry, NOW) == ExpirationTier.WARNING

    def test_thirty_one_days_is_caution(self):
        assert expiration_tier(NOW + timedelta(days=31), NOW) == ExpirationTier.CAUTION

    def test_sixty_days_is_caution(self):
        assert expiration_tier(NOW + timedelta(days=60, hours=12), NOW) == ExpirationTier.CAUTION

    def test_sixty_one_days_is_neutral(self):
        assert expiration_tier(NOW + timedelta(days=61), NOW) == ExpirationTier.NEUTRAL

    def test_negative_partial_day_floors_down(self):
        assert days_until(NOW - timedelta(hours=1), NOW) == -1


class TestStockSummary:
    def test_counts_and_shortages(self):
        items = [
            _item(0, critical=True, item_id="A"),
            _item(0, item_id="B"),
            _item(3, item_id="C"),
            _item(30, item_id="D", unit_cost=2.5),
            _item(30, item_id="E", expires=NOW - timedelta(days=2)),
        ]
        summary = summarize_stock(items, NOW)

        assert summary["total"] == 5
        assert summary["counts"]["Critical Missing"] == 1
        assert summary["counts"]["Out of Stock"] == 1
        assert summary["counts"]["Low Stock"] == 1
        assert summary["counts"]["In Stock"] == 1
        assert summary["counts"]["Expired"] == 1
        assert [r["item_id"] for r in summary["low_stock_items"]] == ["A", "B", "C"]
        assert summary["inventory_value"] == 75.0

    def test_empty_inventory(self):
        summary = summarize_stock([], NOW)
        assert summary["total"] == 0
        assert summary["low_stock_items"] == []
        assert summary["inventory_value"] == 0.0

    def test_rows_include_expiration_tier(self):
        summary = summarize_stock([_item(10, expires=NOW + timedelta(days=45))], NOW)
        assert summary["items"][0]["expiration_tier"] == "caution"
