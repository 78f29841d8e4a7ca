"""
Hotmart purchase webhook.

Fulfillment runs inline: the response tells Hotmart whether to retry. Any
non-2xx status makes Hotmart redeliver; unknown products answer 200 so it
stops.
"""
import logging
from json import JSONDecodeError

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_reconciler
from app.integrations.hotmart import HOTTOK_HEADER
from app.models.event import EventStatus
from app.services.audit import record_delivery
from app.services.fulfillment import (
    FULFILLED,
    FulfillmentError,
    FulfillmentReconciler,
    MethodNotAllowed,
    Unauthorized,
    UnhandledException,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])


async def _read_body(request: Request):
    try:
        return await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        logger.warning("Hotmart webhook body is not valid JSON")
        return {}


@router.post("/hotmart")
async def hotmart_webhook(
    request: Request,
    db: Session = Depends(get_db),
    reconciler: FulfillmentReconciler = Depends(get_reconciler),
):
    """Turn a Hotmart sale into an enrollment (find-or-create user, upsert enrollment)."""
    # Store calls and password hashing are blocking
    try:
        body = await _read_body(request)
        result = await run_in_threadpool(
            reconciler.handle, request.method, body, request.headers.get(HOTTOK_HEADER)
        )
    except Unauthorized as e:
        return JSONResponse(e.body(), status_code=e.status_code)
    except FulfillmentError as e:
        await run_in_threadpool(
            record_delivery, db, e.event, EventStatus.FAILED,
            outcome=type(e).__name__, error_message=e.message,
        )
        return JSONResponse(e.body(), status_code=e.status_code)
    except Exception:
        logger.exception("Unexpected error processing Hotmart webhook")
        await run_in_threadpool(db.rollback)
        error = UnhandledException()
        return JSONResponse(error.body(), status_code=error.status_code)

    if result.outcome == FULFILLED:
        await run_in_threadpool(
            record_delivery, db, result.event, EventStatus.PROCESSED,
            outcome=result.outcome, target_id=result.user_id,
        )
    else:
        await run_in_threadpool(
            record_delivery, db, result.event, EventStatus.IGNORED, outcome=result.outcome,
        )
    return JSONResponse(result.body(), status_code=result.status_code)


@router.api_route(
    "/hotmart",
    methods=["GET", "HEAD", "OPTIONS", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def hotmart_webhook_wrong_method():
    error = MethodNotAllowed()
    return PlainTextResponse(error.message, status_code=error.status_code)
