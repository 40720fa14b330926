from __future__ import annotations

import logging
from http import HTTPStatus

from flask import Blueprint, render_template

from pastebin.api.context import get_paste_store, request_now
from pastebin.errors import BackendError
from pastebin.observability import get_correlation_id

pages_bp = Blueprint("pages", __name__)

logger = logging.getLogger(__name__)


@pages_bp.route("/", methods=["GET"])
def index() -> tuple[str, int]:
    """Create form. Submits to the JSON API and shows the share link."""
    return render_template("index.html"), HTTPStatus.OK


@pages_bp.route("/p/<paste_id>", methods=["GET"])
def show_paste(paste_id: str) -> tuple[str, int]:
    """
    Human-readable view of a paste.

    Rendering counts as a view, exactly like the JSON endpoint.
    """
    try:
        paste = get_paste_store().fetch_paste(paste_id, now=request_now())
    except BackendError:
        logger.exception(
            "Error rendering paste",
            extra={
                "event": "paste_page_failed",
                "paste_id": paste_id,
                "error_type": "BackendError",
                "correlation_id": get_correlation_id(),
            },
        )
        return (
            render_template("unavailable.html", message="Service unavailable"),
            HTTPStatus.SERVICE_UNAVAILABLE,
        )

    if paste is None:
        return (
            render_template("unavailable.html", message="Paste not found"),
            HTTPStatus.NOT_FOUND,
        )

    return render_template("paste.html", paste=paste), HTTPStatus.OK
