import json
from typing import Dict

from pydantic import ValidationError

from connection import deliver
from exceptions import SignalingError
from logging_config import get_logger
from registry import RoomRegistry, room_registry
from schemas.signaling import RELAY_KINDS, ErrorMessage, InboundMessage, JoinedMessage

logger = get_logger(__name__)


class ConnectionLifecycleHandler:
    """Turns transport events for a single connection into registry calls."""

    def __init__(self, registry: RoomRegistry):
        self.registry = registry
        self._connections: Dict[str, object] = {}

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def on_open(self, connection):
        self._connections[connection.connection_id] = connection
        logger.info(f"Client connected: {connection.connection_id} (total: {len(self._connections)})")

    def on_message(self, connection, raw: str):
        decoded = self.decode(raw)
        if decoded is None:
            logger.warning(f"Dropping malformed message from connection {connection.connection_id}")
            return

        message, envelope = decoded
        try:
            if envelope.kind == "join":
                self._handle_join(connection, envelope.room)
            elif envelope.kind == "leave":
                self.registry.leave(connection, envelope.room)
            elif envelope.kind in RELAY_KINDS:
                self.registry.relay(connection, envelope.room, message)
            else:
                logger.debug(f"Unknown message type from {connection.connection_id}: {envelope.kind}")
        except SignalingError as e:
            logger.info(f"Rejected '{envelope.kind}' from {connection.connection_id}: {e.message}")
            deliver(connection, ErrorMessage(message=e.message).to_wire())

    def on_close(self, connection):
        if not connection.mark_closed():
            logger.debug(f"Close already handled for connection {connection.connection_id}")
            return
        room_code = self.registry.room_of(connection)
        if room_code is not None:
            self.registry.leave(connection, room_code)
        self._connections.pop(connection.connection_id, None)
        logger.info(f"Client disconnected: {connection.connection_id}")

    def on_error(self, connection, error: Exception):
        logger.error(f"WebSocket error on connection {connection.connection_id}: {error}", exc_info=error)

    @staticmethod
    def decode(raw):
        """Parse a frame into (raw dict, envelope), or None if it is not a valid envelope."""
        try:
            message = json.loads(raw)
        except (ValueError, TypeError) as e:
            logger.debug(f"Invalid message: {e}")
            return None
        if not isinstance(message, dict):
            return None
        try:
            envelope = InboundMessage.model_validate(message)
        except ValidationError as e:
            logger.debug(f"Invalid message envelope: {e.errors()}")
            return None
        return message, envelope

    def _handle_join(self, connection, room_code):
        result = self.registry.join(connection, room_code)
        if result.already_member:
            return
        deliver(connection, JoinedMessage(room=result.room, is_host=result.is_host, peer_count=result.peer_count).to_wire())


lifecycle_handler = ConnectionLifecycleHandler(room_registry)
