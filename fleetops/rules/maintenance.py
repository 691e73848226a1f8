"""Bakım oturumu sonuçları ve özet istatistikler.

Oturum süresi gün cinsinden yukarı yuvarlanır (ceil). Son kullanma tarihi
hesabındaki aşağı yuvarlamadan farklıdır; iki kural birbirinden bağımsızdır.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Iterable, Optional

from fleetops.models.records import MaintenanceOutcome, MaintenanceSession

logger = logging.getLogger(__name__)

RETURNED_STATUSES = frozenset({"available", "assigned", "in_service"})
RETIRED_STATUSES = frozenset({"retired"})

SECONDS_PER_DAY = 60 * 60 * 24


@dataclass
class MaintenanceStats:
    total_sessions: int = 0
    total_cost: float = 0.0
    avg_duration_days: int = 0
    returned_to_service: int = 0
    retired: int = 0
    completion_rate: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def round_half_up(value: float) -> int:
    """0.5 değerlerini yukarı yuvarlar (banker's rounding yerine)."""
    return math.floor(value + 0.5)


def session_duration_days(
    started_at: datetime, completed_at: Optional[datetime]
) -> Optional[int]:
    """Oturum süresini tam gün olarak döndürür (yukarı yuvarlanır)."""
    if completed_at is None:
        return None
    return math.ceil((completed_at - started_at).total_seconds() / SECONDS_PER_DAY)


def classify_outcome(item_status: Optional[str]) -> Optional[MaintenanceOutcome]:
    """Ünitenin güncel durumuna göre bakım sonucunu belirler.

    Tanınmayan durumlar hiçbir gruba girmez.
    """
    if item_status in RETURNED_STATUSES:
        return MaintenanceOutcome.RETURNED_TO_SERVICE
    if item_status in RETIRED_STATUSES:
        return MaintenanceOutcome.RETIRED
    return None


def maintenance_stats(sessions: Iterable[MaintenanceSession]) -> MaintenanceStats:
    """Tamamlanmış oturumlar üzerinden toplam maliyet, ortalama süre ve
    tamamlanma oranını hesaplar.

    İstatistikler filtrelenmiş sonuç gruplarına değil tüm koleksiyona göre
    hesaplanır; oturum sayısı 0 ise oranlar 0 döner.
    """
    sessions = list(sessions)
    stats = MaintenanceStats(total_sessions=len(sessions))
    if not sessions:
        return stats

    durations = []
    for session in sessions:
        stats.total_cost += session.total_cost or 0.0
        days = session_duration_days(session.started_at, session.completed_at)
        if days is not None:
            durations.append(days)

        outcome = classify_outcome(session.item_status)
        if outcome is MaintenanceOutcome.RETURNED_TO_SERVICE:
            stats.returned_to_service += 1
        elif outcome is MaintenanceOutcome.RETIRED:
            stats.retired += 1
        else:
            logger.debug(
                "Sonuç grubu dışı durum: %s (%s)", session.item_status, session.session_id
            )

    if durations:
        stats.avg_duration_days = round_half_up(sum(durations) / len(durations))
    stats.completion_rate = round_half_up(
        stats.returned_to_service / stats.total_sessions * 100
    )
    return stats


def cost_by_technician(sessions: Iterable[MaintenanceSession]) -> dict[str, dict]:
    """Teknisyen bazında oturum sayısı ve maliyeti gruplar.

    Teknisyeni bilinmeyen oturumlar gruplamaya alınmaz.
    """
    groups: dict[str, dict] = {}
    for session in sessions:
        tech = (session.primary_technician or "").strip()
        if not tech:
            continue
        group = groups.setdefault(tech, {"sessions": 0, "total_cost": 0.0})
        group["sessions"] += 1
        group["total_cost"] += session.total_cost or 0.0
    return groups
