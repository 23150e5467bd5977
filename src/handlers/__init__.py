"""
Lambda handlers package for AWS Lambda functions.
"""
from .calendar import handler as calendar_handler
from .profiles import handler as profiles_handler

__all__ = ["calendar_handler", "profiles_handler"]
