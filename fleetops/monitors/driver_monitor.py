"""Driver Compliance Monitor - Eğitim ve belge geçerlilik tarihlerini izler."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from fleetops import config
from fleetops.models.records import CredentialRecord, TrainingRecord, parse_timestamp
from fleetops.monitors.base_monitor import BaseMonitor
from fleetops.rules.drivers import expiration_items, expiry_counts, training_report

logger = logging.getLogger(__name__)

TRAINING_TABLE = "DriverTrainingRecords"
CREDENTIALS_TABLE = "DriverCredentials"

# Belge tablosundaki tarih alanı -> (item_type, item_name)
CREDENTIAL_FIELDS = {
    "license_expiry_date": ("license", "Driver License"),
    "medical_card_expiry_date": ("medical_card", "Medical Card"),
}


class DriverComplianceMonitor(BaseMonitor):
    """Sürücü eğitimlerini ve süresi dolan belgeleri raporlayan izleyici."""

    def __init__(self, region_name: str = config.REGION, **kwargs: Any):
        super().__init__(
            monitor_name="DriverComplianceMonitor",
            region_name=region_name,
            **kwargs,
        )

    def load_training(self) -> list[TrainingRecord]:
        return [
            TrainingRecord(
                driver_id=row["driver_id"],
                driver_name=row.get("driver_name", ""),
                training_type=row.get("training_type", ""),
                next_due=parse_timestamp(row.get("next_due")),
            )
            for row in self.scan_all(TRAINING_TABLE)
        ]

    def load_credentials(self) -> list[CredentialRecord]:
        """Belge satırlarını ve eğitim tarihlerini tek listeye açar."""
        records = []
        for row in self.scan_all(CREDENTIALS_TABLE):
            for field_name, (item_type, item_name) in CREDENTIAL_FIELDS.items():
                expiry = parse_timestamp(row.get(field_name))
                if expiry is None:
                    continue
                records.append(
                    CredentialRecord(
                        driver_id=row["driver_id"],
                        driver_name=row.get("driver_name", ""),
                        item_type=item_type,
                        item_name=item_name,
                        expiry_date=expiry,
                    )
                )

        for training in self.load_training():
            if training.next_due is None:
                continue
            records.append(
                CredentialRecord(
                    driver_id=training.driver_id,
                    driver_name=training.driver_name,
                    item_type="training",
                    item_name=training.training_type,
                    expiry_date=training.next_due,
                )
            )
        return records

    def expiration_report(self, now: Optional[datetime] = None) -> dict:
        ref = now or datetime.now(timezone.utc)
        items = expiration_items(
            self.load_credentials(), ref, self.config.expiry_horizon_days
        )
        counts = expiry_counts(items)
        self.record_report("credential_expiration", counts)
        return {"items": items, "counts": counts}

    def training_status_report(self, now: Optional[datetime] = None) -> list[dict]:
        return training_report(self.load_training(), now, self.config.training_due_soon_days)

    def process(self, now: Optional[datetime] = None) -> dict:
        report = self.expiration_report(now)
        return {"monitor": self.monitor_name, "counts": report["counts"]}
