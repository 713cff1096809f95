from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import iso_or_none
from ..common.http import domain_error, json_body, server_error
from ..core.exceptions import DomainError
from ..container import Container
from ..identity.guards import AuthGuard, current_identity


def register(app: Flask, container: Container) -> None:
    guard = AuthGuard(container.token_service)

    @app.route("/auth/register-face", methods=["POST"], endpoint="register_face")
    @guard.login_required
    def register_face():
        try:
            data = json_body()
            status = container.face_service.enroll(current_identity().user_id, data.get("faceDescriptor"))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("registering face")

        return jsonify(
            {
                "message": "Face registered successfully",
                "faceRegistered": status.registered,
                "registrationDate": iso_or_none(status.registration_date),
            }
        )

    @app.route("/auth/verify-face", methods=["POST"], endpoint="verify_face")
    @guard.login_required
    def verify_face():
        try:
            data = json_body()
            result = container.face_service.verify(current_identity().user_id, data.get("faceDescriptor"))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("verifying face")

        return jsonify(
            {
                "verified": result.verified,
                "confidence": result.confidence,
                "distance": result.distance,
                "threshold": result.threshold,
            }
        )

    @app.route("/auth/face-status", methods=["GET"], endpoint="face_status")
    @guard.login_required
    def face_status():
        try:
            status = container.face_service.status(current_identity().user_id)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("checking face status")

        return jsonify({"faceRegistered": status.registered, "registrationDate": iso_or_none(status.registration_date)})
