"""
Lambda handler applying profile and settings changes to the stored state.
"""
from typing import Dict, Optional
from datetime import date
import json

from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import BaseModel, Field, ValidationError

from src.models.profile import AppState
from src.services import state as transitions
from src.services.exceptions import InvalidSettingError, ProfileNotFoundError
from src.services.state import StateRepository, encode_state
from src.utils.clients import get_repository
from src.utils.logging import logger


class ProfileRequest(BaseModel):
    """State change request model."""
    action: str = Field(..., pattern=(
        "^(add|delete|update|activate|set_anchor|edit|"
        "shift_calendar|shift_summary|settings)$"
    ))
    profile_id: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None
    day: Optional[date] = None
    delta: int = 0
    icon: Optional[str] = None
    password: Optional[str] = None


def _require_profile_id(request: ProfileRequest) -> str:
    if not request.profile_id:
        raise ValueError(f"profile_id is required for '{request.action}'")
    return request.profile_id


def apply_request(request: ProfileRequest, repository: StateRepository) -> AppState:
    """
    Apply one state change and persist the result.

    Args:
        request: Parsed change request
        repository: State repository to read from and write to

    Returns:
        The new state snapshot

    Raises:
        ProfileNotFoundError: If the request names an unknown profile
        InvalidSettingError: If a settings value is not allowed
        ValueError: If a required field is missing
    """
    state = repository.load()
    action = request.action

    if action == "add":
        return repository.add_profile(state)
    if action == "delete":
        return repository.delete_profile(state, _require_profile_id(request))
    if action == "update":
        changes = {}
        if request.name is not None:
            changes["name"] = request.name
        if request.color is not None:
            changes["color"] = request.color
        return repository.apply(state, transitions.update_profile, _require_profile_id(request), **changes)
    if action == "activate":
        return repository.apply(state, transitions.set_active_profile, _require_profile_id(request))
    if action == "set_anchor":
        if request.day is None:
            raise ValueError("day is required for 'set_anchor'")
        return repository.apply(state, transitions.set_anchor, request.day)
    if action == "edit":
        return repository.apply(state, transitions.enable_edit_mode, request.profile_id)
    if action == "shift_calendar":
        return repository.apply(state, transitions.shift_calendar_month, request.delta)
    if action == "shift_summary":
        return repository.apply(state, transitions.shift_summary_month, request.delta)
    return repository.apply(
        state,
        transitions.update_settings,
        name=request.name,
        icon=request.icon,
        password=request.password
    )


def _error(status: int, message: str) -> Dict:
    return {
        'statusCode': status,
        'body': json.dumps({'error': message})
    }


@logger.inject_lambda_context
def handler(event: Dict, context: LambdaContext) -> Dict:
    """
    Handle profile and settings change requests.

    Args:
        event: API Gateway Lambda proxy event
        context: Lambda context

    Returns:
        API Gateway Lambda proxy response with the new snapshot
    """
    try:
        request = ProfileRequest.model_validate_json(event.get('body') or '{}')
        state = apply_request(request, get_repository())
        logger.info("Applied state change", extra={"action": request.action})
        return {
            'statusCode': 200,
            'body': encode_state(state)
        }

    except ProfileNotFoundError as e:
        logger.warning("Unknown profile", extra={"profile_id": e.profile_id})
        return _error(404, str(e))

    except (ValidationError, InvalidSettingError, ValueError) as e:
        logger.warning("Invalid state change request", extra={"error": str(e)})
        return _error(400, str(e))

    except Exception as e:
        logger.exception('Failed to apply state change')
        return _error(500, str(e))
