from pydantic import BaseModel
from typing import Optional


class StatusResponse(BaseModel):
    status: str = "ok"
    rooms: int
    connections: int
    clips: Optional[int] = None
    uptime: int
