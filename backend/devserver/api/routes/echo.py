"""Echo endpoint."""

import logging

from fastapi import APIRouter

from devserver.models.echo import EchoRequest, EchoResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/echo")
async def echo(payload: EchoRequest) -> EchoResponse:
    """Return the message with its length in UTF-8 bytes."""
    logger.info("Echo request received: %s", payload.message)
    return EchoResponse(
        echo=payload.message,
        length=len(payload.message.encode("utf-8")),
    )
