"""Test helper functions."""

import json
from typing import Any, Dict, Optional
from unittest.mock import MagicMock


def create_vercel_request(
    method: str = "PATCH",
    path: str = "/api/listings/update",
    body: Any = None,
    query: Optional[Dict[str, str]] = None,
    user: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Create a Vercel request object for testing."""
    if headers is None:
        headers = {"content-type": "application/json"}

    return {
        "method": method,
        "path": path,
        "headers": headers,
        "body": json.dumps(body) if isinstance(body, dict) else body,
        "query": query or {},
        "user": user,
    }


def mock_supabase_table(rows=None, count=None):
    """Chainable table mock whose execute() returns the given rows."""
    query = MagicMock()
    for method in ("select", "eq", "in_", "gte", "lte", "order", "range", "limit", "contains", "insert", "update", "delete"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=rows if rows is not None else [], count=count)
    client = MagicMock()
    client.table.return_value = query
    return client, query


def response_json(response: Dict[str, Any]) -> Dict[str, Any]:
    return json.loads(response["body"])
