from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from routers.clips import clips_router
from routers.status import status_router
from backend import clip_backend
from connection import Connection
from lifecycle import lifecycle_handler
from reclaimer import ReclaimScheduler
from registry import room_registry
from constants import CORS_ORIGINS, LOG_LEVEL, LOG_FILE
from logging_config import get_logger, setup_logging
import asyncio

# Setup logging
setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
logger = get_logger(__name__)

reclaim_scheduler = ReclaimScheduler(room_registry)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The relay works without Redis; only the clip endpoints need it
    clip_backend.ping()
    reclaim_scheduler.start()
    try:
        yield
    finally:
        await reclaim_scheduler.stop()


app = FastAPI(title="Room Signaling Relay", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(status_router)
app.include_router(clips_router)

logger.info("FastAPI application initialized")


@app.websocket("/")
@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Signaling channel for one peer.

    Frames are JSON objects: {"type": "join" | "leave" | "offer" | "answer" | "ice-candidate", "room": "...", "payload": ...}
    """
    await websocket.accept()
    connection = Connection(websocket.send_text)
    writer = asyncio.create_task(connection.pump())
    lifecycle_handler.on_open(connection)

    try:
        while True:
            try:
                message = await websocket.receive()
            except WebSocketDisconnect:
                break
            except Exception as e:
                # Starlette only raises here once the socket is unusable, so the read loop ends
                lifecycle_handler.on_error(connection, e)
                break
            if message["type"] == "websocket.disconnect":
                logger.debug(f"WebSocket disconnected normally for connection {connection.connection_id}")
                break
            # Binary frames carrying JSON are accepted too
            data = message.get("text")
            if data is None:
                data = message.get("bytes")
            lifecycle_handler.on_message(connection, data)
    finally:
        lifecycle_handler.on_close(connection)
        writer.cancel()
        try:
            await writer
        except asyncio.CancelledError:
            pass
        try:
            await websocket.close()
        except Exception as e:
            logger.debug(f"Error closing WebSocket: {e}")
