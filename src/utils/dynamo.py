"""
DynamoDB utility functions for snapshot storage.
"""
import os
from typing import Dict, Optional, Any
import boto3

# Singleton instance
_dynamo_instance = None


def get_dynamo() -> 'DynamoDBClient':
    """
    Get or create the shared DynamoDB client.

    Returns:
        DynamoDBClient: Shared client for the state table

    Raises:
        EnvironmentError: If REDDAY_TABLE_NAME environment variable is not set
    """
    global _dynamo_instance
    if _dynamo_instance is None:
        try:
            table_name = os.environ['REDDAY_TABLE_NAME']
        except KeyError:
            raise EnvironmentError(
                "REDDAY_TABLE_NAME environment variable not set. "
                "This variable must be set to the DynamoDB table name."
            )
        _dynamo_instance = DynamoDBClient(table_name)
    return _dynamo_instance


class DynamoDBClient:
    """Client for interacting with DynamoDB table."""

    def __init__(self, table_name: str):
        self.dynamodb = boto3.resource('dynamodb')
        self.table = self.dynamodb.Table(table_name)

    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """
        Put a single item into the table, replacing any previous version.

        Args:
            item: Dictionary containing item attributes

        Returns:
            Response from DynamoDB
        """
        return self.table.put_item(Item=item)

    def get_item(self, key: Dict[str, str]) -> Optional[Dict[str, Any]]:
        """
        Get a single item from the table.

        Args:
            key: Dictionary containing partition key and sort key

        Returns:
            Item if found, None otherwise
        """
        response = self.table.get_item(Key=key)
        return response.get('Item')


def create_state_pk(storage_key: str) -> str:
    """Create partition key for a stored snapshot."""
    return f"STATE#{storage_key}"


SNAPSHOT_SK = "SNAPSHOT"
