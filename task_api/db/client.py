"""DynamoDB table access for tasks."""

import logging
from functools import lru_cache

import boto3
from botocore.exceptions import ClientError

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)

KEY_SCHEMA = [
    {"AttributeName": "task_id", "KeyType": "HASH"},
    {"AttributeName": "created_at", "KeyType": "RANGE"},
]
ATTRIBUTE_DEFINITIONS = [
    {"AttributeName": "task_id", "AttributeType": "S"},
    {"AttributeName": "created_at", "AttributeType": "S"},
]


def get_resource(settings: Settings):
    """Build a DynamoDB service resource for the configured region/endpoint."""
    kwargs = {"region_name": settings.region}
    if settings.dynamodb_endpoint:
        kwargs["endpoint_url"] = settings.dynamodb_endpoint
    return boto3.resource("dynamodb", **kwargs)


@lru_cache(maxsize=1)
def get_table():
    """
    Table resource for the configured tasks table.

    Built once per process so warm Lambda invocations reuse the HTTP
    connection pool.
    """
    settings = get_settings()
    logger.debug(
        "Opening table %s region=%s endpoint=%s",
        settings.table_name,
        settings.region,
        settings.dynamodb_endpoint,
    )
    return get_resource(settings).Table(settings.table_name)


def ensure_table(settings: Settings | None = None) -> None:
    """Create the tasks table if it does not exist (local development)."""
    settings = settings or get_settings()
    resource = get_resource(settings)
    try:
        table = resource.create_table(
            TableName=settings.table_name,
            KeySchema=KEY_SCHEMA,
            AttributeDefinitions=ATTRIBUTE_DEFINITIONS,
            BillingMode="PAY_PER_REQUEST",
        )
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") == "ResourceInUseException":
            logger.debug("Table %s already exists", settings.table_name)
            return
        raise
    table.wait_until_exists()
    logger.info("Created table %s", settings.table_name)
