from fastapi import APIRouter, HTTPException, Response
from schemas.clips import PutClipRequest, ClipResponse, ClipDetailsResponse
import random
import string
import redis
from datetime import datetime, timedelta, timezone
from backend import clip_backend
from constants import CLIP_TTL_SECONDS
from exceptions import InvalidRoomCode
from registry import validate_room_code
from logging_config import get_logger

logger = get_logger(__name__)

clips_router = APIRouter(prefix="/clips", tags=["clips"])

def generate_clip_code(length: int = 6) -> str:
    return ''.join(random.choices(string.digits, k=length))

def _check_code(code: str):
    try:
        validate_room_code(code)
    except InvalidRoomCode as e:
        raise HTTPException(status_code=422, detail=e.message)

def _store(code: str, clip: PutClipRequest) -> ClipResponse:
    ttl = clip.ttl_seconds or CLIP_TTL_SECONDS
    expires_at = (datetime.now(timezone.utc) + timedelta(seconds=ttl)).isoformat()
    try:
        clip_backend.put_clip(code, clip.text, ttl)
    except redis.RedisError as e:
        logger.error(f"Error storing clip {code}: {e}", exc_info=True)
        raise HTTPException(status_code=503, detail="Clip store unavailable")
    return ClipResponse(code=code, expires_at=expires_at)


@clips_router.post("/", response_model=ClipResponse, status_code=201)
async def create_clip(clip: PutClipRequest):
    try:
        for _ in range(10):
            code = generate_clip_code()
            if not clip_backend.clip_exists(code):
                break
        else:
            logger.error("Failed to generate unique clip code")
            raise HTTPException(status_code=503, detail="Failed to generate unique clip code")
    except redis.RedisError as e:
        logger.error(f"Error generating clip code: {e}", exc_info=True)
        raise HTTPException(status_code=503, detail="Clip store unavailable")
    return _store(code, clip)


@clips_router.put("/{code}", response_model=ClipResponse)
async def put_clip(code: str, clip: PutClipRequest):
    _check_code(code)
    return _store(code, clip)


@clips_router.get("/{code}", response_model=ClipDetailsResponse)
async def get_clip(code: str):
    try:
        found = clip_backend.get_clip(code)
    except redis.RedisError as e:
        logger.error(f"Error fetching clip {code}: {e}", exc_info=True)
        raise HTTPException(status_code=503, detail="Clip store unavailable")
    if found is None:
        raise HTTPException(status_code=404, detail="Clip not found")
    text, ttl = found
    return ClipDetailsResponse(code=code, text=text, ttl_seconds=ttl)


@clips_router.delete("/{code}", status_code=204)
async def delete_clip(code: str):
    try:
        clip_backend.delete_clip(code)
    except redis.RedisError as e:
        logger.error(f"Error deleting clip {code}: {e}", exc_info=True)
        raise HTTPException(status_code=503, detail="Clip store unavailable")
    return Response(status_code=204)
