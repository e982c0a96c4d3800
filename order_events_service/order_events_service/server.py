"""FastAPI server implementation for the Order Events Service."""

import base64
import binascii

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from .config import get_config
from .logger import logger
from .pipeline import OrderWebhookPipeline
from .schemas import WebhookResponse
from .verification import SIGNATURE_HEADER, get_signature_header

app = FastAPI(title="Order Events Service")

_pipeline: OrderWebhookPipeline | None = None


def get_pipeline() -> OrderWebhookPipeline:
    """Return the shared pipeline, building it from the process config on first use."""
    global _pipeline
    if _pipeline is None:
        _pipeline = OrderWebhookPipeline(get_config())
    return _pipeline


def set_pipeline(pipeline: OrderWebhookPipeline | None) -> None:
    """Replace the shared pipeline (None resets it to be rebuilt from config)."""
    global _pipeline
    _pipeline = pipeline


@app.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy"}


@app.post("/webhooks/orders/create")
async def order_created(request: Request):
    """Receive a Shopify orders/create webhook.

    The raw body is read before anything else because the signature covers
    the exact bytes sent. Outbound calls block, so the pipeline runs in the
    threadpool.
    """
    body = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)
    result = await run_in_threadpool(get_pipeline().handle, body, signature)
    return PlainTextResponse(result.body, status_code=result.status_code)


def serverless_handler(event: dict, context=None) -> dict:
    """Entry point for function-style deployments.

    Args:
        event: Invocation event with "headers" and a raw string "body"
        context: Runtime context, unused

    Returns:
        dict: {"statusCode": ..., "body": ...}
    """
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError):
            logger.error("Webhook body is not valid base64")
            result = WebhookResponse.unauthorized()
            return {"statusCode": result.status_code, "body": result.body}
    signature = get_signature_header(event.get("headers"))
    result = get_pipeline().handle(body, signature)
    return {"statusCode": result.status_code, "body": result.body}


logger.info("Webhook routes registered: /webhooks/orders/create")
