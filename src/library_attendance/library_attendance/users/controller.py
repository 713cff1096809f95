from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import domain_error, json_body, server_error
from ..core.constants import SESSION_COOKIE_NAME
from ..core.exceptions import DomainError
from ..container import Container
from ..identity.guards import AuthGuard


def register(app: Flask, container: Container) -> None:
    guard = AuthGuard(container.token_service)

    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        try:
            data = json_body()
            token, identity = container.auth_service.login(data.get("email", ""), data.get("password", ""))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("logging in")

        resp = jsonify(
            {
                "message": "Login successful",
                "token": token,
                "user": identity.to_claims(),
            }
        )
        resp.set_cookie(
            SESSION_COOKIE_NAME,
            token,
            max_age=int(container.token_service.ttl.total_seconds()),
            httponly=True,
            secure=not app.config.get("DEBUG", False) and not app.config.get("TESTING", False),
            samesite="Lax",
        )
        return resp

    @app.route("/auth/signup", methods=["POST"], endpoint="auth_signup")
    def auth_signup():
        try:
            data = json_body()
            user = container.auth_service.signup(
                name=data.get("name", ""),
                email=data.get("email", ""),
                password=data.get("password", ""),
                role=data.get("role"),
            )
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("signing up")

        return (
            jsonify(
                {
                    "message": "User created successfully",
                    "user": {"id": user.user_id, "name": user.name, "email": user.email, "role": user.role.value},
                }
            ),
            201,
        )

    @app.route("/auth/logout", methods=["POST"], endpoint="auth_logout")
    @guard.login_required
    def auth_logout():
        resp = jsonify({"message": "Logged out"})
        resp.delete_cookie(SESSION_COOKIE_NAME)
        return resp
