from pydantic import BaseModel, Field
from typing import Optional

from constants import CLIP_MAX_LENGTH, CLIP_MAX_TTL_SECONDS


class PutClipRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=CLIP_MAX_LENGTH)
    ttl_seconds: Optional[int] = Field(None, ge=1, le=CLIP_MAX_TTL_SECONDS)

class ClipResponse(BaseModel):
    code: str
    expires_at: str

class ClipDetailsResponse(BaseModel):
    code: str
    text: str
    ttl_seconds: int
