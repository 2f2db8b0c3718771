from constants import ROOM_CODE_MIN_LENGTH, ROOM_CODE_MAX_LENGTH


class SignalingError(Exception):
    """Base class for errors reported back to the requesting peer."""

    message = "Signaling error"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidRoomCode(SignalingError):
    message = f"Invalid room code ({ROOM_CODE_MIN_LENGTH}-{ROOM_CODE_MAX_LENGTH} characters required)"


class RoomFull(SignalingError):
    message = "Room is full"


class RoomNotFound(SignalingError):
    message = "Room not found"
