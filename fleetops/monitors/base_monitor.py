"""Tüm izleyiciler için temel sınıf - DynamoDB erişimi ve rapor kaydı."""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

import boto3
from boto3.dynamodb.conditions import ConditionBase
from botocore.exceptions import ClientError

from fleetops import config
from fleetops.models.records import DashboardConfig, to_native

logger = logging.getLogger(__name__)


@dataclass
class ReportRecord:
    report_id: str
    monitor_name: str
    report_type: str
    summary: dict
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class BaseMonitor(ABC):
    """DynamoDB tabanlı izleyici temel sınıfı.

    Türetilmiş değerler veritabanına geri yazılmaz; üretilen raporlar yalnızca
    loglanır ve bellekte tutulur.
    """

    def __init__(
        self,
        monitor_name: str,
        region_name: str = config.REGION,
        dynamodb_resource: Optional[Any] = None,
        dashboard_config: Optional[DashboardConfig] = None,
    ):
        self.monitor_name = monitor_name
        self.region_name = region_name
        self.config = dashboard_config or DashboardConfig()

        # AWS istemcisi - dependency injection destekli
        self.dynamodb = dynamodb_resource or boto3.resource(
            "dynamodb", region_name=region_name
        )

        self._reports: list[ReportRecord] = []

        logger.info("İzleyici başlatıldı: %s (region: %s)", monitor_name, region_name)

    def table(self, base_name: str) -> Any:
        return self.dynamodb.Table(config.table_name(base_name))

    def scan_all(
        self, base_name: str, filter_expression: Optional[ConditionBase] = None
    ) -> list[dict]:
        """Tablonun tüm sayfalarını tarar, Decimal değerleri çevirir."""
        kwargs: dict[str, Any] = {}
        if filter_expression is not None:
            kwargs["FilterExpression"] = filter_expression
        return self._paginate(base_name, "scan", kwargs)

    def query_all(self, base_name: str, **kwargs: Any) -> list[dict]:
        """Sorgunun tüm sayfalarını döndürür (IndexName, KeyConditionExpression...)."""
        return self._paginate(base_name, "query", dict(kwargs))

    def _paginate(self, base_name: str, operation: str, kwargs: dict[str, Any]) -> list[dict]:
        method = getattr(self.table(base_name), operation)
        items: list[dict] = []
        try:
            while True:
                response = method(**kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.error("%s hatası [%s/%s]: %s", operation, self.monitor_name, base_name, e)
            raise

        logger.info("%s: %d kayıt okundu", base_name, len(items))
        return [to_native(item) for item in items]

    def record_report(self, report_type: str, summary: dict) -> ReportRecord:
        """Rapor özetini loglar ve geçmişe ekler."""
        report = ReportRecord(
            report_id=str(uuid.uuid4()),
            monitor_name=self.monitor_name,
            report_type=report_type,
            summary=summary,
        )
        self._reports.append(report)
        logger.info("[%s] %s raporu: %s", self.monitor_name, report_type, summary)
        return report

    def get_reports(self) -> list[ReportRecord]:
        return list(self._reports)

    @abstractmethod
    def process(self, *args: Any, **kwargs: Any) -> Any:
        """Her izleyici kendi rapor mantığını implement eder."""
        ...
