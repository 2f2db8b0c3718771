from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Literal, Optional


RELAY_KINDS = frozenset({"offer", "answer", "ice-candidate"})


class InboundMessage(BaseModel):
    # Unknown fields are kept so relayed frames go out exactly as they came in
    model_config = ConfigDict(extra="allow")

    kind: str = Field(alias="type")
    room: Optional[Any] = None
    payload: Optional[Any] = None


class OutboundMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class JoinedMessage(OutboundMessage):
    type: Literal["joined"] = "joined"
    room: str
    is_host: bool = Field(alias="isHost")
    peer_count: int = Field(alias="peerCount")


class ErrorMessage(OutboundMessage):
    type: Literal["error"] = "error"
    message: str


class PeerJoinedMessage(OutboundMessage):
    type: Literal["peer-joined"] = "peer-joined"
    room: str


class PeerLeftMessage(OutboundMessage):
    type: Literal["peer-left"] = "peer-left"
    room: str
