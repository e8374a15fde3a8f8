"""Identity provider webhook endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse

from src.identity_sync.api.http.deps import get_webhook_dispatcher
from src.identity_sync.core.services import WebhookDispatcher
from src.identity_sync.core.services.webhooks import WebhookStatus
from src.identity_sync.runtime.context import get_config

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


class WebhookResponse(BaseModel):
    """Body returned for every webhook call, whatever the outcome."""

    status: WebhookStatus
    detail: str
    request_id: str | None = None


@router.post(
    "/{provider}/user-update",
    response_model=WebhookResponse,
    responses={
        202: {"model": WebhookResponse, "description": "Accepted, nothing to apply"},
        400: {"model": WebhookResponse, "description": "Malformed payload"},
        401: {"model": WebhookResponse, "description": "Invalid webhook credentials"},
        404: {"model": WebhookResponse, "description": "Unknown provider"},
        500: {"model": WebhookResponse, "description": "Processing failed; retry"},
    },
)
async def receive_user_update(
    provider: str,
    request: Request,
    dispatcher: WebhookDispatcher = Depends(get_webhook_dispatcher),
) -> JSONResponse:
    """Apply an MFA / email verification change reported by an identity provider.

    The body is read as raw bytes and only parsed after the shared secret in
    the configured header has been verified.
    """
    received_at = datetime.now(UTC)
    raw_body = await request.body()
    secret = request.headers.get(get_config().webhooks.header_name)

    outcome = await run_in_threadpool(
        dispatcher.handle, provider, secret, raw_body, received_at
    )

    body = WebhookResponse(
        status=outcome.status,
        detail=outcome.detail,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=outcome.status_code, content=body.model_dump(mode="json"))
