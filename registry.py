import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

from connection import deliver
from constants import MAX_PEERS_PER_ROOM, ROOM_CODE_MAX_LENGTH, ROOM_CODE_MIN_LENGTH
from exceptions import InvalidRoomCode, RoomFull, RoomNotFound
from logging_config import get_logger
from schemas.signaling import PeerJoinedMessage, PeerLeftMessage

logger = get_logger(__name__)


@dataclass(frozen=True)
class JoinResult:
    room: str
    is_host: bool
    peer_count: int
    already_member: bool = False


@dataclass(frozen=True)
class ReclaimReport:
    rooms_deleted: int = 0
    connections_removed: int = 0


def validate_room_code(room_code) -> str:
    if not isinstance(room_code, str) or not ROOM_CODE_MIN_LENGTH <= len(room_code) <= ROOM_CODE_MAX_LENGTH:
        raise InvalidRoomCode()
    return room_code


class RoomRegistry:
    """Room membership and message fan-out.

    Two maps are kept in step under a single lock:
    - rooms: {room_code: {connection_id: connection}} in arrival order
    - memberships: {connection_id: room_code}

    A room exists only while it has members. Deliveries are non-blocking
    enqueues made while the lock is held, so every recipient sees a room's
    events in the order they were serialized here.
    """

    def __init__(self, max_peers: int = MAX_PEERS_PER_ROOM):
        self.max_peers = max_peers
        self._rooms: Dict[str, Dict[str, object]] = {}
        self._memberships: Dict[str, str] = {}
        self._lock = threading.Lock()

    def join(self, connection, room_code) -> JoinResult:
        room_code = validate_room_code(room_code)
        with self._lock:
            members = self._rooms.get(room_code, {})
            if connection.connection_id in members:
                logger.debug(f"Connection {connection.connection_id} already in room {room_code}")
                return JoinResult(room=room_code, is_host=next(iter(members)) == connection.connection_id, peer_count=len(members), already_member=True)

            if len(members) >= self.max_peers:
                logger.info(f"Join rejected: room {room_code} is full ({len(members)}/{self.max_peers})")
                raise RoomFull()

            previous = self._memberships.get(connection.connection_id)
            if previous is not None:
                logger.info(f"Connection {connection.connection_id} switching from room {previous} to {room_code}")
                self._remove_member(connection, previous)

            members = self._rooms.setdefault(room_code, {})
            members[connection.connection_id] = connection
            self._memberships[connection.connection_id] = room_code
            peer_count = len(members)
            logger.info(f"Client joined room {room_code} ({peer_count}/{self.max_peers} peers)")

            if peer_count == self.max_peers:
                notification = PeerJoinedMessage(room=room_code).to_wire()
                for member_id, member in members.items():
                    if member_id != connection.connection_id:
                        deliver(member, notification)

            return JoinResult(room=room_code, is_host=peer_count == 1, peer_count=peer_count)

    def leave(self, connection, room_code) -> bool:
        """Remove a connection from a room. Never raises; returns False if it was not a member."""
        with self._lock:
            return self._remove_member(connection, room_code)

    def relay(self, sender, room_code, message: dict) -> int:
        """Forward a message verbatim to everyone in the room except the sender."""
        with self._lock:
            members = self._rooms.get(room_code) if isinstance(room_code, str) else None
            if members is None:
                logger.debug(f"Relay from {sender.connection_id} to unknown room {room_code}")
                raise RoomNotFound()

            delivered = 0
            for member_id, member in members.items():
                if member_id != sender.connection_id and deliver(member, message):
                    delivered += 1
            logger.debug(f"Relayed '{message.get('type', 'unknown')}' in room {room_code} to {delivered} peer(s)")
            return delivered

    def reclaim(self) -> ReclaimReport:
        """Drop dead members and empty rooms. Dead members are not announced."""
        rooms_deleted = 0
        connections_removed = 0
        with self._lock:
            room_codes = list(self._rooms.keys())
        for room_code in room_codes:
            with self._lock:
                members = self._rooms.get(room_code)
                if members is None:
                    continue
                for member_id, member in list(members.items()):
                    if not member.is_open:
                        del members[member_id]
                        self._memberships.pop(member_id, None)
                        connections_removed += 1
                if not members:
                    del self._rooms[room_code]
                    rooms_deleted += 1
        if connections_removed:
            logger.debug(f"Reclaimed {connections_removed} dead connection(s)")
        return ReclaimReport(rooms_deleted=rooms_deleted, connections_removed=connections_removed)

    def room_of(self, connection) -> Optional[str]:
        with self._lock:
            return self._memberships.get(connection.connection_id)

    def members(self, room_code: str) -> List[str]:
        with self._lock:
            return list(self._rooms.get(room_code, {}).keys())

    def member_count(self, room_code: str) -> int:
        with self._lock:
            return len(self._rooms.get(room_code, {}))

    def has_room(self, room_code: str) -> bool:
        with self._lock:
            return room_code in self._rooms

    @property
    def room_count(self) -> int:
        with self._lock:
            return len(self._rooms)

    def snapshot(self) -> Dict[str, List[str]]:
        with self._lock:
            return {code: list(members.keys()) for code, members in self._rooms.items()}

    def _remove_member(self, connection, room_code) -> bool:
        # Caller holds the lock
        members = self._rooms.get(room_code) if isinstance(room_code, str) else None
        if members is None or connection.connection_id not in members:
            return False

        del members[connection.connection_id]
        if self._memberships.get(connection.connection_id) == room_code:
            del self._memberships[connection.connection_id]

        notification = PeerLeftMessage(room=room_code).to_wire()
        for member in members.values():
            deliver(member, notification)

        if not members:
            del self._rooms[room_code]
            logger.info(f"Room {room_code} is empty, deleted")
        logger.info(f"Client left room {room_code}")
        return True


room_registry = RoomRegistry()
