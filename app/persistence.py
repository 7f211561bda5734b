import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from settings import DEFAULT_SCAN_LIMIT

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when a DynamoDB call fails."""


class DynamoManager:
    def __init__(self, config):
        self.config = config
        self.region = config['aws']['region']
        self.scan_limit = config['aws'].get('scan_limit', DEFAULT_SCAN_LIMIT)

        # Note: AWS credentials are automatically picked up from the environment
        # (e.g. ~/.aws/credentials, env vars, or IAM role if on EC2)
        self.dynamodb = boto3.resource(
            'dynamodb',
            region_name=self.region,
            endpoint_url=config['aws'].get('endpoint_url'),
        )

    def list_tables(self):
        """Names of all tables in the region."""
        try:
            names = [table.name for table in self.dynamodb.tables.all()]
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error listing tables: {e}")
            raise StoreError(f"Error fetching tables: {e}") from e
        logger.info(f"Found {len(names)} tables in {self.region}")
        return names

    def scan_table(self, table_name, limit=None):
        """
        Fetch up to `limit` items from a table (a single Scan page).
        Items come back deserialized: numbers as Decimal, binaries as Binary.
        """
        limit = limit or self.scan_limit
        try:
            response = self.dynamodb.Table(table_name).scan(Limit=limit)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error scanning {table_name}: {e}")
            raise StoreError(f"Error fetching items from {table_name}: {e}") from e
        items = response.get('Items', [])
        logger.info(f"Scanned {len(items)} items from {table_name}")
        return items

    def describe_table(self, table_name):
        """Key schema and approximate item count of a table."""
        try:
            table = self.dynamodb.Table(table_name)
            return {
                'name': table.name,
                'key_schema': table.key_schema,
                'item_count': table.item_count,
            }
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error describing {table_name}: {e}")
            raise StoreError(f"Error describing {table_name}: {e}") from e
