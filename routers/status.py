from fastapi import APIRouter
import time
import redis
from schemas.status import StatusResponse
from backend import clip_backend
from lifecycle import lifecycle_handler
from registry import room_registry
from logging_config import get_logger

logger = get_logger(__name__)

status_router = APIRouter(tags=["status"])

STARTED_AT = time.monotonic()


@status_router.get("/health", response_model=StatusResponse)
@status_router.get("/", response_model=StatusResponse)
async def health():
    try:
        clips = clip_backend.count_clips()
    except redis.RedisError as e:
        logger.debug(f"Clip store unavailable for status: {e}")
        clips = None
    return StatusResponse(
        rooms=room_registry.room_count,
        connections=lifecycle_handler.connection_count,
        clips=clips,
        uptime=int(time.monotonic() - STARTED_AT),
    )
