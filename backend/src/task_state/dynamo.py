"""
DynamoDB utility functions for reading tasks and applications.
"""
import time
import boto3
from typing import List, Dict, Any, Optional
from botocore.exceptions import ClientError
from .config import config
from .logging import logger

dynamodb = boto3.resource('dynamodb', region_name=config.AWS_REGION)

# BatchGetItem accepts at most 100 keys per request
BATCH_GET_LIMIT = 100

# Backoff between UnprocessedKeys retries, doubled each attempt
RETRY_BASE_DELAY = 0.05
RETRY_MAX_DELAY = 2.0


def query(
    table_name: str,
    index_name: Optional[str] = None,
    key_condition: Optional[Any] = None,
    filter_expression: Optional[Any] = None,
    limit: Optional[int] = None,
    scan_forward: bool = True
) -> List[Dict[str, Any]]:
    """
    Query DynamoDB table or index, following pagination.

    Args:
        table_name: Name of the DynamoDB table
        index_name: Optional GSI name
        key_condition: Key condition expression
        filter_expression: Optional filter expression
        limit: Max items to return
        scan_forward: True for ascending, False for descending

    Returns:
        List of items matching the query
    """
    try:
        table = dynamodb.Table(table_name)

        query_params = {
            'ScanIndexForward': scan_forward
        }

        if index_name:
            query_params['IndexName'] = index_name
        if key_condition:
            query_params['KeyConditionExpression'] = key_condition
        if filter_expression:
            query_params['FilterExpression'] = filter_expression
        if limit:
            query_params['Limit'] = limit

        items = []
        while True:
            response = table.query(**query_params)
            items.extend(response.get('Items', []))
            last_key = response.get('LastEvaluatedKey')
            if not last_key or (limit and len(items) >= limit):
                break
            query_params['ExclusiveStartKey'] = last_key

        return items[:limit] if limit else items

    except ClientError as e:
        logger.error(f"Error querying {table_name}: {e}")
        return []


def get_item(table_name: str, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Get a single item from DynamoDB."""
    try:
        table = dynamodb.Table(table_name)
        response = table.get_item(Key=key)
        return response.get('Item')
    except ClientError as e:
        logger.error(f"Error getting item from {table_name}: {e}")
        return None


def batch_get_items(table_name: str, key_name: str, key_values: List[Any]) -> List[Dict[str, Any]]:
    """
    Fetch many items by primary key.
    Handles batching and unprocessed keys automatically.

    Args:
        table_name: Name of the DynamoDB table
        key_name: Partition key attribute name
        key_values: Key values to fetch (duplicates are ignored)

    Returns:
        Items found, in no particular order
    """
    unique_values = list(dict.fromkeys(v for v in key_values if v is not None))
    items = []

    try:
        for i in range(0, len(unique_values), BATCH_GET_LIMIT):
            batch = unique_values[i:i + BATCH_GET_LIMIT]
            request = {table_name: {'Keys': [{key_name: value} for value in batch]}}

            delay = RETRY_BASE_DELAY
            while request:
                response = dynamodb.batch_get_item(RequestItems=request)
                items.extend(response.get('Responses', {}).get(table_name, []))
                request = response.get('UnprocessedKeys') or None
                if request:
                    logger.warning(f"Retrying unprocessed keys on {table_name} in {delay}s")
                    time.sleep(delay)
                    delay = min(delay * 2, RETRY_MAX_DELAY)

        logger.info(f"Fetched {len(items)} of {len(unique_values)} items from {table_name}")
        return items

    except ClientError as e:
        logger.error(f"Error batch reading from {table_name}: {e}")
        return items
