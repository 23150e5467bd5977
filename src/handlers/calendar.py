"""
Lambda handler serving calendar and summary grids.
"""
from typing import Dict, List, Optional
from datetime import date
import json

from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import BaseModel, Field, ValidationError

from src.models.calendar import CalendarCell, CalendarHeader, SummaryCell
from src.services.calendar import build_header, build_month_grid, build_summary_grid
from src.services.state import StateRepository, get_active_profile
from src.utils.clients import get_clock, get_repository
from src.utils.dates import Clock
from src.utils.logging import logger


class CalendarRequest(BaseModel):
    """Calendar view request model."""
    view: str = Field("calendar", pattern="^(calendar|summary)$")
    month: Optional[date] = None  # Defaults to the stored cursor


class CalendarResponse(BaseModel):
    """Month grid for the active profile."""
    profile_id: str
    month: date
    header: CalendarHeader
    cells: List[CalendarCell]


class SummaryResponse(BaseModel):
    """Month grid with marks for every configured profile."""
    month: date
    cells: List[SummaryCell]


def build_calendar_view(
    request: CalendarRequest,
    repository: StateRepository,
    clock: Clock
) -> BaseModel:
    """
    Build the requested view from the stored state.

    Args:
        request: Parsed view request
        repository: State repository to read from
        clock: Source of today's date for the header

    Returns:
        CalendarResponse or SummaryResponse
    """
    state = repository.load()

    if request.view == "summary":
        month = request.month or state.summary_cursor_month
        return SummaryResponse(month=month, cells=build_summary_grid(month, state.profiles))

    profile = get_active_profile(state)
    month = request.month or state.calendar_cursor_month
    logger.debug("Building calendar", extra={"profile_id": profile.id, "month": str(month)})
    return CalendarResponse(
        profile_id=profile.id,
        month=month,
        header=build_header(month, profile.anchor, clock.today()),
        cells=build_month_grid(month, profile.anchor)
    )


@logger.inject_lambda_context
def handler(event: Dict, context: LambdaContext) -> Dict:
    """
    Handle calendar view requests.

    Args:
        event: API Gateway Lambda proxy event
        context: Lambda context

    Returns:
        API Gateway Lambda proxy response
    """
    try:
        request = CalendarRequest.model_validate_json(event.get('body') or '{}')
        response = build_calendar_view(request, get_repository(), get_clock())
        return {
            'statusCode': 200,
            'body': response.model_dump_json()
        }

    except ValidationError as e:
        logger.warning("Invalid calendar request", extra={"error": str(e)})
        return {
            'statusCode': 400,
            'body': json.dumps({'error': str(e)})
        }

    except Exception as e:
        logger.exception('Failed to build calendar')
        return {
            'statusCode': 500,
            'body': json.dumps({'error': str(e)})
        }
