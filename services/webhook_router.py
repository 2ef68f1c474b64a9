"""
Slack webhook endpoint.

Slack sends Events API callbacks as JSON and slash commands as form posts to
the same URL. Both carry the app's verification token in the body.
"""

import hmac
import logging
from typing import Dict, Optional

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from core.config import settings
from core.exceptions import SlackLookupError
from models.data_models import SlackEvent
from services.box_client import BOX_ERRORS
from services.box_command import COMMAND


router = APIRouter()



async def _read_body(request: Request) -> Optional[Dict]:
    """Decode a JSON or form-encoded body, None when it cannot be decoded"""
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/x-www-form-urlencoded"):
            form = await request.form()
            return dict(form)
        body = await request.json()
    except (ValueError, UnicodeDecodeError) as e:
        logging.warning(f"Could not decode request body: {e}")
        return None

    return body if isinstance(body, dict) else None



def _token_matches(token, expected: str) -> bool:
    if not isinstance(token, str):
        return False
    return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))



@router.post("/event")
async def handle_event(request: Request):
    """Verify the request, then dispatch it as a URL check, an event or a command"""
    body = await _read_body(request)
    if body is None:
        return Response(status_code=400)

    if not _token_matches(body.get("token"), request.app.state.slack_config.verification_token):
        logging.warning("Slack verification failed")
        return PlainTextResponse("Slack Verification Failed", status_code=400)

    if body.get("type") == "url_verification":
        return handle_url_verification(body)
    elif body.get("type") == "event_callback":
        return await handle_event_callback(request, body)
    elif body.get("command") == COMMAND:
        return await handle_command(request, body)

    return Response(status_code=400)



def handle_url_verification(body: Dict):
    """Handles event webhook verification challenge"""
    logging.info("Received URL verification challenge")
    return JSONResponse({"challenge": body.get("challenge")})



async def handle_event_callback(request: Request, body: Dict):
    """Handle incoming `event_callback` webhooks"""
    payload = body.get("event")
    if not isinstance(payload, dict):
        logging.warning("event_callback without an event object")
        return Response(status_code=400)

    event = SlackEvent.from_payload(payload)
    slack = request.app.state.slack
    group_sync = request.app.state.group_sync

    try:
        user = await slack.get_user(event.user)
        await group_sync.sync_user(user, event.type, event.channel)
    except SlackLookupError as e:
        logging.error(f"Skipping {event.type} in {event.channel}: {e}")
    except BOX_ERRORS as e:
        logging.error(f"Box error while handling {event.type} in {event.channel}: {e}")

    return Response(status_code=200)



async def handle_command(request: Request, body: Dict):
    """Handles an incoming slash command"""
    box_command = request.app.state.box_command
    channel_id = body.get("channel_id", "")
    user_id = body.get("user_id", "")

    logging.info(f"Received {COMMAND} {body.get('text', '')} from {user_id} in {channel_id}")

    try:
        message = await box_command.handle(channel_id, user_id, body.get("text", ""))
    except BOX_ERRORS as e:
        logging.error(f"Box error while handling {COMMAND}: {e}")
        message = "Could not reach Box, please try again later"

    return PlainTextResponse(message)



@router.get("/health")
async def health():
    """Liveness probe, makes no outbound calls"""
    return {"status": "ok", "version": settings.VERSION}
