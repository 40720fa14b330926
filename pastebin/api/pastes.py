from __future__ import annotations

import logging
from http import HTTPStatus

from flask import Blueprint, current_app, request
from pydantic import ValidationError

from pastebin.api.context import get_paste_store, request_now
from pastebin.api.schemas import (
    HealthResponse,
    PasteCreatedResponse,
    PasteCreateRequest,
    PasteViewResponse,
)
from pastebin.errors import BackendError
from pastebin.observability import get_correlation_id

api_bp = Blueprint("api", __name__, url_prefix="/api")

logger = logging.getLogger(__name__)

SERVICE_UNAVAILABLE = {"error": "Service unavailable"}


@api_bp.route("/healthz", methods=["GET"])
def health() -> tuple[dict, int]:
    """Round-trip a key through the storage backend."""

    if not get_paste_store().health_check():
        return HealthResponse(ok=False).model_dump(), HTTPStatus.SERVICE_UNAVAILABLE
    return HealthResponse().model_dump(), HTTPStatus.OK


@api_bp.route("/pastes", methods=["POST"])
def create_paste() -> tuple[dict, int]:
    """
    Create a new paste.

    Validation is handled by Pydantic; expiry rules by the paste store.
    """
    try:
        payload = PasteCreateRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        return {"error": "Invalid request body", "details": str(exc)}, HTTPStatus.BAD_REQUEST

    try:
        paste_id = get_paste_store().create_paste(
            payload.content,
            ttl_seconds=payload.ttl_seconds,
            max_views=payload.max_views,
            now=request_now(),
        )
    except BackendError:
        logger.exception(
            "Error creating paste",
            extra={
                "event": "paste_create_failed",
                "error_type": "BackendError",
                "correlation_id": get_correlation_id(),
            },
        )
        return SERVICE_UNAVAILABLE, HTTPStatus.SERVICE_UNAVAILABLE

    base_url = current_app.config["PUBLIC_BASE_URL"].rstrip("/")
    body = PasteCreatedResponse(id=paste_id, url=f"{base_url}/p/{paste_id}")
    return body.model_dump(), HTTPStatus.CREATED


@api_bp.route("/pastes/<paste_id>", methods=["GET"])
def view_paste(paste_id: str) -> tuple[dict, int]:
    """Fetch a paste; each call consumes one view when a limit is set."""

    try:
        paste = get_paste_store().fetch_paste(paste_id, now=request_now())
    except BackendError:
        logger.exception(
            "Error fetching paste",
            extra={
                "event": "paste_fetch_failed",
                "paste_id": paste_id,
                "error_type": "BackendError",
                "correlation_id": get_correlation_id(),
            },
        )
        return SERVICE_UNAVAILABLE, HTTPStatus.SERVICE_UNAVAILABLE

    if paste is None:
        return {"error": "Paste not found"}, HTTPStatus.NOT_FOUND

    return PasteViewResponse.from_paste(paste).model_dump(mode="json"), HTTPStatus.OK
