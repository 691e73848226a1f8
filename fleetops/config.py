"""Merkezi ortam ayarları. Proje kökündeki .env dosyasını yükler."""

import os
from pathlib import Path

from dotenv import load_dotenv

_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

REGION = os.environ.get("AWS_DEFAULT_REGION", "us-west-2")

# Ortamlar arası tablo ayrımı için (örn. "staging-")
TABLE_PREFIX = os.environ.get("FLEETOPS_TABLE_PREFIX", "")


def table_name(base: str) -> str:
    """Önekli DynamoDB tablo adını döndürür."""
    return f"{TABLE_PREFIX}{base}"
