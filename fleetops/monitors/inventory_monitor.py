"""Spill Kit Inventory Monitor - Sarf malzemesi stok durumlarını izler.

- Envanter kalemlerini stok ve son kullanma durumuna göre sınıflandırır
- Eksik stok listesini ve envanter değerini raporlar
- Düzenleme taslaklarını tek yazma işlemiyle kaydeder
- Kullanılan malzemeyi stoktan düşer (tek transaction)
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError

from fleetops import config
from fleetops.models.drafts import InventoryDraft, to_wire
from fleetops.models.records import InventoryItem, StockStatus, to_dynamo
from fleetops.monitors.base_monitor import BaseMonitor
from fleetops.rules.stock import classify_stock, summarize_stock

logger = logging.getLogger(__name__)

INVENTORY_TABLE = "SpillKitInventory"
USAGE_LOG_TABLE = "SpillKitUsageLog"


class ValidationError(Exception):
    """Envanter işlem validasyon hatası."""
    pass


class InsufficientStockError(ValidationError):
    """Yetersiz stok hatası."""
    pass


class SpillKitInventoryMonitor(BaseMonitor):
    """Spill kit envanterini izleyen ve stok hareketlerini yazan izleyici."""

    def __init__(self, region_name: str = config.REGION, **kwargs: Any):
        super().__init__(
            monitor_name="SpillKitInventoryMonitor",
            region_name=region_name,
            **kwargs,
        )
        self.inventory_table = self.table(INVENTORY_TABLE)
        self._serializer = TypeSerializer()

    # --- Okuma ---

    def load_items(self) -> list[InventoryItem]:
        """Tüm envanter kalemlerini ada göre sıralı döndürür."""
        rows = self.scan_all(INVENTORY_TABLE)
        items = [InventoryItem.from_row(row) for row in rows]
        items.sort(key=lambda i: i.item_name)
        return items

    def get_item(self, item_id: str) -> Optional[InventoryItem]:
        try:
            response = self.inventory_table.get_item(Key={"item_id": item_id})
        except ClientError as e:
            logger.error("Envanter kalemi okunamadı: %s - %s", item_id, e)
            raise
        row = response.get("Item")
        return InventoryItem.from_row(row) if row else None

    # --- Sınıflandırma ---

    def classify_items(
        self, items: list[InventoryItem], now: Optional[datetime] = None
    ) -> dict[str, StockStatus]:
        """Kalem ID'sine göre stok durumlarını döndürür."""
        ref = now or datetime.now(timezone.utc)
        return {item.item_id: classify_stock(item, ref) for item in items}

    def inventory_report(
        self, items: Optional[list[InventoryItem]] = None, now: Optional[datetime] = None
    ) -> dict:
        """Durum sayıları, eksik stok listesi ve envanter değeri."""
        if items is None:
            items = self.load_items()
        report = summarize_stock(items, now)

        self.record_report(
            "inventory_status",
            {
                "total": report["total"],
                "low_stock_count": len(report["low_stock_items"]),
                "inventory_value": report["inventory_value"],
            },
        )
        return report

    # --- Taslak kaydetme ---

    def save_draft(self, draft: InventoryDraft) -> Optional[str]:
        """Taslağı tek bir yazma işlemiyle kaydeder, kalem ID'sini döndürür.

        Yeni kalemler put_item, mevcut kalemler yalnızca değişen alanlarla
        tek bir update_item ile yazılır. Değişiklik yoksa yazma yapılmaz.
        """
        timestamp = datetime.now(timezone.utc).isoformat()

        if draft.is_new:
            item_id = str(uuid.uuid4())
            record = to_wire(draft)
            record.update({"item_id": item_id, "created_at": timestamp, "updated_at": timestamp})
            self.inventory_table.put_item(Item=to_dynamo(record))
            logger.info("Envanter kalemi eklendi: %s (%s)", item_id, record.get("item_name"))
            return item_id

        changed = draft.changes()
        if not changed:
            logger.info("Değişiklik yok, kayıt atlandı: %s", draft.item_id)
            return draft.item_id

        record = to_wire(draft, only=set(changed))
        record["updated_at"] = timestamp

        names = {}
        values = {}
        assignments = []
        for i, (key, value) in enumerate(record.items()):
            names[f"#f{i}"] = key
            values[f":v{i}"] = value
            assignments.append(f"#f{i} = :v{i}")

        self.inventory_table.update_item(
            Key={"item_id": draft.item_id},
            UpdateExpression="SET " + ", ".join(assignments),
            ExpressionAttributeNames=names,
            ExpressionAttributeValues=to_dynamo(values),
        )
        logger.info("Envanter kalemi güncellendi: %s alanlar=%s", draft.item_id, sorted(changed))
        return draft.item_id

    # --- Kullanım kaydı ---

    def validate_usage(self, item: Optional[InventoryItem], item_id: str, quantity: int) -> bool:
        """Kullanım kaydı öncesi stok kontrolü."""
        if quantity <= 0:
            raise ValidationError("Kullanım miktarı pozitif olmalıdır")
        if item is None:
            raise ValidationError(f"Envanter kalemi bulunamadı: {item_id}")
        if item.current_stock < quantity:
            raise InsufficientStockError(
                f"Yetersiz stok: {item_id} mevcut={item.current_stock}, istenen={quantity}"
            )
        return True

    def mark_item_used(
        self,
        item_id: str,
        quantity: int,
        used_by: str,
        notes: str = "",
        vehicle_id: Optional[str] = None,
    ) -> dict:
        """Kullanılan miktarı stoktan düşer ve kullanım kaydı ekler.

        Stok düşümü ve kayıt ekleme tek bir DynamoDB transaction'ı içinde
        yapılır: ya ikisi birden yazılır ya da hiçbiri. Transaction, stok okunan
        değerden beri değişmemişse uygulanır; böylece kayıttaki stock_before ve
        stock_after düşülen satırla aynıdır.
        """
        item = self.get_item(item_id)
        self.validate_usage(item, item_id, quantity)

        timestamp = datetime.now(timezone.utc).isoformat()
        usage = {
            "usage_id": str(uuid.uuid4()),
            "item_id": item_id,
            "quantity_used": quantity,
            "used_by": used_by,
            "notes": notes or None,
            "vehicle_id": vehicle_id,
            "stock_before": item.current_stock,
            "stock_after": item.current_stock - quantity,
            "created_at": timestamp,
        }

        transact_items = [
            {
                "Update": {
                    "TableName": config.table_name(INVENTORY_TABLE),
                    "Key": {"item_id": self._serializer.serialize(item_id)},
                    "UpdateExpression": (
                        "SET current_stock = :after, last_usage_date = :ts "
                        "ADD usage_count :one"
                    ),
                    "ConditionExpression": "current_stock = :before",
                    "ExpressionAttributeValues": {
                        ":before": self._serializer.serialize(usage["stock_before"]),
                        ":after": self._serializer.serialize(usage["stock_after"]),
                        ":ts": self._serializer.serialize(timestamp),
                        ":one": self._serializer.serialize(1),
                    },
                }
            },
            {
                "Put": {
                    "TableName": config.table_name(USAGE_LOG_TABLE),
                    "Item": {k: self._serializer.serialize(v) for k, v in usage.items()},
                }
            },
        ]

        try:
            self.dynamodb.meta.client.transact_write_items(TransactItems=transact_items)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "TransactionCanceledException":
                logger.warning("Kullanım kaydı iptal edildi: %s - %s", item_id, e)
                raise InsufficientStockError(
                    f"Stok kullanım sırasında değişti: {item_id}"
                ) from e
            logger.error("Kullanım kaydı hatası: %s - %s", item_id, e)
            raise

        logger.info(
            "Kullanım kaydedildi: %s x%d (%d -> %d)",
            item_id, quantity, usage["stock_before"], usage["stock_after"],
        )
        return usage

    # --- BaseMonitor.process implementasyonu ---

    def process(self, now: Optional[datetime] = None) -> dict:
        """Envanteri oku, sınıflandır ve özet döndür."""
        report = self.inventory_report(now=now)
        return {
            "monitor": self.monitor_name,
            "total_items": report["total"],
            "counts": report["counts"],
            "low_stock_items": report["low_stock_items"],
        }
