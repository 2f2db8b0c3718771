import os

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3001))
RELOAD = os.getenv("RELOAD", "false").lower() in ("1", "true", "yes", "on")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)

REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
REDIS_PORT = int(os.getenv("REDIS_PORT", 6379))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD", None)

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

# Room codes are chosen by clients; only the length is enforced here
ROOM_CODE_MIN_LENGTH = 4
ROOM_CODE_MAX_LENGTH = 8
MAX_PEERS_PER_ROOM = 2

RECLAIM_INTERVAL_SECONDS = float(os.getenv("RECLAIM_INTERVAL_SECONDS", 300))
OUTBOUND_QUEUE_SIZE = int(os.getenv("OUTBOUND_QUEUE_SIZE", 64))

CLIP_TTL_SECONDS = int(os.getenv("CLIP_TTL_SECONDS", 600))
CLIP_MAX_TTL_SECONDS = int(os.getenv("CLIP_MAX_TTL_SECONDS", 3600))
CLIP_MAX_LENGTH = int(os.getenv("CLIP_MAX_LENGTH", 65536))
