from __future__ import annotations

import logging

from flask import jsonify, request

from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def json_body() -> dict:
    """Request JSON as a dict; anything else is a client error."""

    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def domain_error(e: DomainError):
    return jsonify({"error": str(e)}), e.http_status


def server_error(action: str):
    """Log the active exception and answer with a normalised 500."""

    logger.exception("Unexpected error while %s", action)
    return jsonify({"error": "Internal server error"}), 500
