from __future__ import annotations

from flask import Flask, jsonify, send_file

from ..common.datetime_utils import iso_or_none
from ..common.http import domain_error, json_body, server_error
from ..common.validators import optional_positive_int, require_bool
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container
from ..identity.guards import AuthGuard, current_identity
from .image import render_qr_png
from .model import QRSession


def session_to_json(s: QRSession) -> dict:
    return {
        "qrToken": s.qr_token,
        "expiresAt": iso_or_none(s.expires_at),
        "locationRequired": s.location_required,
    }


def register(app: Flask, container: Container) -> None:
    guard = AuthGuard(container.token_service)

    @app.route("/qr-sessions", methods=["POST"], endpoint="qr_sessions_create")
    @guard.roles_required(Role.ADMIN)
    def qr_sessions_create():
        try:
            data = json_body()
            issued = container.qr_session_service.create_session(
                current_identity(),
                location_required=require_bool(data.get("locationRequired"), "locationRequired"),
                expires_in_seconds=optional_positive_int(data.get("expiresInSeconds"), "expiresInSeconds"),
            )
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("creating QR session")

        payload = session_to_json(issued.session)
        if issued.created:
            payload["message"] = "New QR session created"
            return jsonify(payload), 201
        payload["message"] = "Using existing active QR session for today"
        return jsonify(payload), 200

    @app.route("/qr-sessions/validate", methods=["POST"], endpoint="qr_sessions_validate")
    def qr_sessions_validate():
        try:
            data = json_body()
            session = container.qr_session_service.validate_token(data.get("qrToken"))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("validating QR token")

        return jsonify(
            {
                "valid": True,
                "locationRequired": session.location_required,
                "expiresAt": iso_or_none(session.expires_at),
            }
        )

    @app.route("/qr-sessions/active", methods=["GET"], endpoint="qr_sessions_active")
    @guard.roles_required(Role.ADMIN)
    def qr_sessions_active():
        try:
            session = container.qr_session_service.get_active_session_for_issuer(current_identity().user_id)
        except Exception:
            return server_error("fetching active QR session")

        if not session:
            return jsonify({"active": False, "message": "No active QR session for today"})

        payload = session_to_json(session)
        payload.update({"active": True, "createdAt": iso_or_none(session.created_at)})
        return jsonify(payload)

    @app.route("/qr-sessions/active/image", methods=["GET"], endpoint="qr_sessions_active_image")
    @guard.roles_required(Role.ADMIN)
    def qr_sessions_active_image():
        """PNG of the issuer's active token, for printing or projecting."""
        try:
            session = container.qr_session_service.get_active_session_for_issuer(current_identity().user_id)
            if not session:
                return jsonify({"error": "No active QR session for today"}), 404
            return send_file(render_qr_png(session.qr_token), mimetype="image/png")
        except Exception:
            return server_error("rendering QR image")
