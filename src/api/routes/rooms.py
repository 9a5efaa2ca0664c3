"""Room API Routes - Room bootstrap and service banner.

Provides:
- GET /get-token: mint a room, issue a LiveKit join token, register an
  empty history for the room
- GET /: service banner
"""

import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from livekit import api
from pydantic import BaseModel

from src.api.dependencies import get_relay_settings, get_store
from src.config.constants import RELAY
from src.config.settings import Settings
from src.observability.logging import get_logger
from src.orchestrator.store import ConversationStore

logger = get_logger(__name__)

router = APIRouter(tags=["rooms"])


class TokenResponse(BaseModel):
    """Join credential for a freshly minted room."""

    roomName: str
    token: str
    identity: str


class BannerResponse(BaseModel):
    """Service banner."""

    message: str


def mint_room_name(prefix: str) -> str:
    """Room name in the form {prefix}-{epoch_ms}."""
    return f"{prefix}-{int(time.time() * 1000)}"


def create_access_token(settings: Settings, room_name: str, identity: str) -> str:
    """Issue a LiveKit JWT allowing identity to join room_name."""
    token = (
        api.AccessToken(settings.livekit_api_key, settings.livekit_api_secret)
        .with_identity(identity)
        .with_name(identity)
        .with_grants(api.VideoGrants(room_join=True, room=room_name))
    )
    return token.to_jwt()


@router.get(
    "/get-token",
    response_model=TokenResponse,
    responses={500: {"description": "Token could not be issued"}},
)
async def get_token(
    store: ConversationStore = Depends(get_store),
    settings: Settings = Depends(get_relay_settings),
):
    """Mint a room and return a join token for it.

    The room's conversation history is registered empty before the token
    is returned.
    """
    room_name = mint_room_name(settings.room_prefix)
    identity = RELAY.TOKEN_IDENTITY

    try:
        jwt_token = create_access_token(settings, room_name, identity)
    except Exception as e:
        logger.error("token_issue_failed", room_id=room_name, error=str(e))
        return JSONResponse(status_code=500, content={"error": "Failed to get token"})

    store.register(room_name)
    logger.info("token_issued", room_id=room_name, identity=identity)

    return TokenResponse(roomName=room_name, token=jwt_token, identity=identity)


@router.get("/", response_model=BannerResponse)
async def banner(settings: Settings = Depends(get_relay_settings)) -> BannerResponse:
    """Service banner with the listening port."""
    return BannerResponse(message=f"Server running on port {settings.api_port}")
