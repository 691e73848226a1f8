"""Düzenleme taslakları ve kalıcı kayıt (wire) dönüşümü.

Taslak, kalıcı bir kaydın form üzerindeki düzenlenebilir kopyasıdır. Yalnızca
``apply`` ile değişir ve tek bir yazma işlemiyle kaydedilir. Form metinlerinin
veritabanı değerlerine dönüşümü ``to_wire`` içinde toplanır.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Optional

from fleetops.models.records import InventoryItem

INT_FIELDS = ("current_stock", "minimum_threshold", "reorder_quantity")
FLOAT_FIELDS = ("unit_cost",)


@dataclass(frozen=True)
class InventoryDraft:
    item_id: Optional[str] = None
    item_name: str = ""
    item_type: str = ""
    unit_cost: str = ""
    current_stock: str = ""
    minimum_threshold: str = ""
    reorder_quantity: str = ""
    supplier_name: str = ""
    supplier_contact: str = ""
    supplier_sku: str = ""
    supplier_portal_url: str = ""
    notes: str = ""
    is_critical: bool = False
    expiration_date: str = ""
    lot_batch_number: str = ""
    original: Optional[InventoryDraft] = field(default=None, compare=False, repr=False)

    @classmethod
    def blank(cls) -> InventoryDraft:
        return cls()

    @classmethod
    def from_item(cls, item: InventoryItem) -> InventoryDraft:
        """Kalıcı kayıttan taslak oluşturur; sayılar form metnine çevrilir."""
        expiration = item.expiration_date.date().isoformat() if item.expiration_date else ""
        draft = cls(
            item_id=item.item_id,
            item_name=item.item_name,
            item_type=item.item_type,
            unit_cost=str(item.unit_cost),
            current_stock=str(item.current_stock),
            minimum_threshold=str(item.minimum_threshold),
            reorder_quantity=str(item.reorder_quantity),
            supplier_name=item.supplier_name or "",
            supplier_contact=item.supplier_contact or "",
            supplier_sku=item.supplier_sku or "",
            supplier_portal_url=item.supplier_portal_url or "",
            notes=item.notes or "",
            is_critical=item.is_critical,
            expiration_date=expiration,
            lot_batch_number=item.lot_batch_number or "",
        )
        return replace(draft, original=draft)

    @property
    def is_new(self) -> bool:
        return self.item_id is None

    def apply(self, change: dict[str, Any]) -> InventoryDraft:
        """Değişikliği uygulanmış yeni bir taslak döndürür."""
        editable = {f.name for f in fields(self)} - {"item_id", "original"}
        unknown = set(change) - editable
        if unknown:
            raise ValueError(f"Bilinmeyen alan(lar): {', '.join(sorted(unknown))}")
        return replace(self, **change)

    def changes(self) -> dict[str, Any]:
        """Orijinal kayda göre değişen alanları döndürür."""
        base = self.original or InventoryDraft()
        diff = {}
        for f in fields(self):
            if f.name in ("item_id", "original"):
                continue
            value = getattr(self, f.name)
            if value != getattr(base, f.name):
                diff[f.name] = value
        return diff


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def to_wire(draft: InventoryDraft, only: Optional[set[str]] = None) -> dict[str, Any]:
    """Taslağı veritabanı satırına çevirir.

    Boş metinler None olur, sayısal alanlar ayrıştırılır. ``only`` verilirse
    yalnızca o alanlar döner.
    """
    record: dict[str, Any] = {}
    for f in fields(draft):
        if f.name in ("item_id", "original"):
            continue
        if only is not None and f.name not in only:
            continue

        value = _blank_to_none(getattr(draft, f.name))
        if value is not None and f.name in INT_FIELDS:
            value = int(value)
        elif value is not None and f.name in FLOAT_FIELDS:
            value = float(value)
        elif value is not None and f.name == "expiration_date":
            value = datetime.fromisoformat(value).date().isoformat()
        record[f.name] = value
    return record
