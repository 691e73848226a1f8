"""DynamoDB tablo oluşturma ve veri yükleme.

7 tablo: SpillKitInventory, SpillKitUsageLog, ProductItems, SanitationLogs,
MaintenanceSessions, DriverTrainingRecords, DriverCredentials
"""
import json
import os
import sys

import boto3
from botocore.exceptions import ClientError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))
from fleetops import config
from fleetops.models.records import to_dynamo


TABLE_DEFINITIONS = [
    {
        "TableName": "SpillKitInventory",
        "KeySchema": [
            {"AttributeName": "item_id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "item_id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "SpillKitUsageLog",
        "KeySchema": [
            {"AttributeName": "usage_id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "usage_id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "ProductItems",
        "KeySchema": [
            {"AttributeName": "item_id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "item_id", "AttributeType": "S"},
            {"AttributeName": "product_id", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": "ProductIndex",
                "KeySchema": [
                    {"AttributeName": "product_id", "KeyType": "HASH"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "SanitationLogs",
        "KeySchema": [
            {"AttributeName": "log_id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "log_id", "AttributeType": "S"},
            {"AttributeName": "product_item_id", "AttributeType": "S"},
            {"AttributeName": "created_at", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": "ItemTimeIndex",
                "KeySchema": [
                    {"AttributeName": "product_item_id", "KeyType": "HASH"},
                    {"AttributeName": "created_at", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "MaintenanceSessions",
        "KeySchema": [
            {"AttributeName": "session_id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "session_id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "DriverTrainingRecords",
        "KeySchema": [
            {"AttributeName": "driver_id", "KeyType": "HASH"},
            {"AttributeName": "training_type", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "driver_id", "AttributeType": "S"},
            {"AttributeName": "training_type", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": "DriverCredentials",
        "KeySchema": [
            {"AttributeName": "driver_id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "driver_id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
]

# Tablo adı -> veri dosyası
DATA_FILES = {
    "SpillKitInventory": "spill-kit-inventory.json",
    "ProductItems": "product-items.json",
    "SanitationLogs": "sanitation-logs.json",
    "MaintenanceSessions": "maintenance-sessions.json",
    "DriverTrainingRecords": "driver-training.json",
    "DriverCredentials": "driver-credentials.json",
}


def create_tables(region: str = config.REGION, client=None):
    """Tüm DynamoDB tablolarını oluşturur (önek uygulanır)."""
    dynamodb = client or boto3.client("dynamodb", region_name=region)

    for table_def in TABLE_DEFINITIONS:
        table_name = config.table_name(table_def["TableName"])
        try:
            dynamodb.describe_table(TableName=table_name)
            print(f"  ⏭️  {table_name} zaten mevcut, atlanıyor")
        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceNotFoundException":
                print(f"  🔨 {table_name} oluşturuluyor...")
                dynamodb.create_table(**{**table_def, "TableName": table_name})
                # Tablonun aktif olmasını bekle
                waiter = dynamodb.get_waiter("table_exists")
                waiter.wait(TableName=table_name)
                print(f"  ✓  {table_name} oluşturuldu")
            else:
                raise


def load_data_to_table(table_name: str, data: list, region: str = config.REGION, resource=None):
    """JSON verisini DynamoDB tablosuna batch write ile yükler."""
    dynamodb = resource or boto3.resource("dynamodb", region_name=region)
    table = dynamodb.Table(config.table_name(table_name))
    with table.batch_writer() as batch:
        for item in to_dynamo(data):
            batch.put_item(Item=item)
    print(f"  ✓  {table_name}: {len(data)} kayıt yüklendi")


def load_all_data(data_dir: str = "data_layer/data", region: str = config.REGION, resource=None):
    """Mevcut JSON dosyalarını DynamoDB'ye yükler, olmayanları atlar."""
    print("\n📤 DynamoDB'ye veri yükleniyor...\n")

    for table_name, file_name in DATA_FILES.items():
        path = os.path.join(data_dir, file_name)
        if not os.path.exists(path):
            print(f"  ⏭️  {file_name} bulunamadı, {table_name} atlanıyor")
            continue
        with open(path, "r", encoding="utf-8") as f:
            load_data_to_table(table_name, json.load(f), region, resource)

    print("\n✅ Veri yükleme tamamlandı!")


def delete_tables(region: str = config.REGION, client=None):
    """Tüm tabloları siler (dikkatli kullan)."""
    dynamodb = client or boto3.client("dynamodb", region_name=region)
    for table_def in TABLE_DEFINITIONS:
        table_name = config.table_name(table_def["TableName"])
        try:
            dynamodb.delete_table(TableName=table_name)
            print(f"  🗑️  {table_name} silindi")
        except ClientError:
            print(f"  ⏭️  {table_name} bulunamadı, atlanıyor")


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "--delete":
        print("🗑️  Tablolar siliniyor...")
        delete_tables()
    else:
        print("🏗️  DynamoDB tabloları oluşturuluyor...\n")
        create_tables()
        load_all_data()
