"""
Authentication utilities for extracting viewer identity from Cognito tokens.
"""
from typing import Optional

from .config import config
from .models import parse_int


def get_claims(event: dict) -> dict:
    """Return the Cognito authorizer claims, or an empty dict."""
    try:
        return event['requestContext']['authorizer']['claims'] or {}
    except (KeyError, TypeError):
        return {}


def get_viewer_id(event: dict) -> Optional[int]:
    """
    Extract the numeric marketplace user id of the caller.

    Args:
        event: API Gateway Lambda proxy event

    Returns:
        User id or None for anonymous (or malformed) callers
    """
    return parse_int(get_claims(event).get(config.VIEWER_ID_CLAIM))
