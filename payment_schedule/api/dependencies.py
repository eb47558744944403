"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from payment_schedule.api.v1.schemas import ScheduleDataRequest
from payment_schedule.infrastructure.cache import ScheduleCache, content_hash


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_schedule_cache(request: Request) -> ScheduleCache:
    """Provide the application-wide schedule cache"""
    return request.app.state.schedule_cache


def data_version(body: ScheduleDataRequest) -> str:
    """Caller-supplied version, or a hash of the schedule data when none is sent"""
    if body.version:
        return body.version
    return content_hash(body.model_dump_json(include={"banks", "accounts", "transactions"}))
