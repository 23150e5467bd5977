"""
Centralized client initialization module.

This module provides lazy-loaded shared clients for the Lambda handlers.
"""
import os
from src.utils.dynamo import get_dynamo
from src.utils.storage import DynamoStorage
from src.services.constants import STORAGE_KEY
from src.services.state import StateRepository
from src.utils.dates import SystemClock

_repository = None
_clock = None


def get_clock():
    """Get or create the clock used for 'today'."""
    global _clock
    if _clock is None:
        _clock = SystemClock()
    return _clock


def get_repository() -> StateRepository:
    """Get or create the state repository backed by DynamoDB."""
    global _repository
    if _repository is None:
        _repository = StateRepository(
            DynamoStorage(get_dynamo()),
            clock=get_clock(),
            storage_key=os.environ.get('REDDAY_STORAGE_KEY', STORAGE_KEY)
        )
    return _repository
