"""Filo operasyon paneli veri modelleri."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class StockStatus(str, Enum):
    EXPIRED = "Expired"
    CRITICAL_MISSING = "Critical Missing"
    OUT_OF_STOCK = "Out of Stock"
    LOW_STOCK = "Low Stock"
    IN_STOCK = "In Stock"


class ExpirationTier(str, Enum):
    SEVERE = "severe"
    WARNING = "warning"
    CAUTION = "caution"
    NEUTRAL = "neutral"


class ComplianceStatus(str, Enum):
    GOOD = "good"
    DUE_SOON = "due_soon"
    OVERDUE = "overdue"
    NO_RECORD = "no_record"


class MaintenanceOutcome(str, Enum):
    RETURNED_TO_SERVICE = "returned_to_service"
    RETIRED = "retired"


class TrainingStatus(str, Enum):
    COMPLETED = "completed"
    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    CURRENT = "current"


class ExpiryWindow(str, Enum):
    OVERDUE = "overdue"
    EXPIRING_30 = "expiring_30"
    EXPIRING_60 = "expiring_60"
    EXPIRING_90 = "expiring_90"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO 8601 metni timezone'lu datetime'a çevirir.

    Boş değerler None döner. Timezone bilgisi olmayan değerler UTC kabul edilir,
    yalnızca tarih içeren metinler gün başı (00:00 UTC) olur.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_native(obj: Any) -> Any:
    """DynamoDB Decimal değerlerini int/float'a çevirir."""
    if isinstance(obj, Decimal):
        return int(obj) if obj == int(obj) else float(obj)
    if isinstance(obj, dict):
        return {k: to_native(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [to_native(i) for i in obj]
    return obj


def to_dynamo(obj: Any) -> Any:
    """float değerleri DynamoDB'nin kabul ettiği Decimal'e çevirir."""
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: to_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [to_dynamo(i) for i in obj]
    return obj


@dataclass
class InventoryItem:
    item_id: str
    item_name: str
    current_stock: int
    minimum_threshold: int
    item_type: str = "other"
    is_critical: bool = False
    expiration_date: Optional[datetime] = None
    unit_cost: float = 0.0
    reorder_quantity: int = 0
    supplier_name: Optional[str] = None
    supplier_contact: Optional[str] = None
    supplier_sku: Optional[str] = None
    supplier_portal_url: Optional[str] = None
    notes: Optional[str] = None
    lot_batch_number: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> InventoryItem:
        row = to_native(row)
        return cls(
            item_id=row["item_id"],
            item_name=row.get("item_name", ""),
            current_stock=int(row.get("current_stock") or 0),
            minimum_threshold=int(row.get("minimum_threshold") or 0),
            item_type=row.get("item_type") or "other",
            is_critical=bool(row.get("is_critical", False)),
            expiration_date=parse_timestamp(row.get("expiration_date")),
            unit_cost=float(row.get("unit_cost") or 0.0),
            reorder_quantity=int(row.get("reorder_quantity") or 0),
            supplier_name=row.get("supplier_name"),
            supplier_contact=row.get("supplier_contact"),
            supplier_sku=row.get("supplier_sku"),
            supplier_portal_url=row.get("supplier_portal_url"),
            notes=row.get("notes"),
            lot_batch_number=row.get("lot_batch_number"),
        )


@dataclass
class ComplianceUnit:
    item_id: str
    item_code: str
    last_cleaned_at: Optional[datetime] = None
    cleaning_frequency_days: int = 7

    @property
    def next_due_at(self) -> Optional[datetime]:
        if self.last_cleaned_at is None:
            return None
        return self.last_cleaned_at + timedelta(days=self.cleaning_frequency_days)


@dataclass
class SanitationLog:
    log_id: str
    created_at: datetime
    product_item_id: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> SanitationLog:
        return cls(
            log_id=row["log_id"],
            created_at=parse_timestamp(row["created_at"]),
            product_item_id=row.get("product_item_id") or None,
            notes=row.get("notes"),
        )


@dataclass
class MaintenanceSession:
    session_id: str
    item_id: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    total_cost: float = 0.0
    item_status: str = ""
    item_code: str = ""
    session_number: int = 0
    total_labor_hours: float = 0.0
    session_summary: Optional[str] = None
    primary_technician: Optional[str] = None
    product_name: str = "Unknown Product"

    @classmethod
    def from_row(cls, row: dict, item_status: str = "") -> MaintenanceSession:
        row = to_native(row)
        return cls(
            session_id=row["session_id"],
            item_id=row.get("item_id", ""),
            started_at=parse_timestamp(row["started_at"]),
            completed_at=parse_timestamp(row.get("completed_at")),
            total_cost=float(row.get("total_cost") or 0.0),
            item_status=item_status or row.get("item_status", ""),
            item_code=row.get("item_code", ""),
            session_number=int(row.get("session_number") or 0),
            total_labor_hours=float(row.get("total_labor_hours") or 0.0),
            session_summary=row.get("session_summary"),
            primary_technician=row.get("primary_technician"),
            product_name=row.get("product_name") or "Unknown Product",
        )


@dataclass
class QuoteLineItem:
    description: str
    quantity: int
    unit_price: float
    line_total: Optional[float] = None

    def __post_init__(self) -> None:
        if self.line_total is None:
            self.line_total = self.unit_price * self.quantity


@dataclass
class QuoteTerms:
    discount_type: DiscountType = DiscountType.PERCENTAGE
    discount_value: float = 0.0
    additional_fees: float = 0.0


@dataclass
class TrainingRecord:
    driver_id: str
    driver_name: str
    training_type: str
    next_due: Optional[datetime] = None


@dataclass
class CredentialRecord:
    driver_id: str
    driver_name: str
    item_type: str
    item_name: str
    expiry_date: Optional[datetime] = None


@dataclass
class DashboardConfig:
    cleaning_frequency_days: int = 7
    due_soon_window: timedelta = field(default_factory=lambda: timedelta(days=1))
    quote_tax_rate: float = 0.08
    training_due_soon_days: int = 30
    expiry_horizon_days: int = 90
    maintenance_history_limit: int = 10
