"""
Voice Session WebSocket

Remote voice sessions: the client runs speech recognition and
text-to-speech and relays their events; the server runs the session
state machine and replies with commands and results.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from core.dependencies import get_calculator, get_result_sinks
from services.calculator import CalculatorService
from services.voice.remote import RemoteVoiceSession
from services.voice.scheduler import AsyncioScheduler
from utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Voice"])


async def _pump(websocket: WebSocket, session: RemoteVoiceSession) -> None:
    """Forward outbound session messages to the client."""
    async for message in session.bridge.outbound():
        await websocket.send_json(message)


@router.websocket("/ws/voice")
async def voice_session(
    websocket: WebSocket,
    language: Optional[str] = None,
    continuous: bool = False,
    muted: Optional[bool] = None,
    finality: bool = True,
    calculator: CalculatorService = Depends(get_calculator),
):
    """
    WebSocket endpoint for a remote voice session.

    Query parameters:
        language: Initial language code
        continuous: Keep listening across utterances
        muted: Do not speak results
        finality: Client delivers final transcripts; when false the
            server detects utterance boundaries from interim text
    """
    await websocket.accept()
    logger.info(f"Voice session connected: {websocket.client}")

    session = RemoteVoiceSession(
        calculator=calculator,
        scheduler=AsyncioScheduler(),
        sinks=get_result_sinks(),
        language=language,
        continuous_mode=continuous,
        muted=muted,
        supports_finality=finality,
    )
    sender = asyncio.create_task(_pump(websocket, session))

    try:
        while True:
            message = await websocket.receive_json()
            session.handle(message)
    except WebSocketDisconnect:
        logger.info(f"Voice session disconnected: {websocket.client}")
    except ValueError as e:
        # receive_json() on a non-JSON frame
        logger.warning(f"Voice session closed on malformed frame: {e}")
        await websocket.close(code=1003)
    finally:
        session.close()
        sender.cancel()
        try:
            await sender
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.debug(f"Voice session sender stopped: {e}")
