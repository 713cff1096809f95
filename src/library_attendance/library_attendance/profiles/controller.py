from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import iso_or_none
from ..common.http import domain_error, server_error
from ..core.enums import Role
from ..core.exceptions import DomainError, NotFoundError
from ..container import Container
from ..identity.guards import AuthGuard, current_identity
from .model import StaffProfile, StudentProfile


def student_to_json(p: StudentProfile) -> dict:
    return {
        "id": p.student_id,
        "user": p.user_id,
        "studentId": p.student_code,
        "fullName": p.full_name,
        "email": p.email,
        "phone": p.phone,
        "membershipStart": iso_or_none(p.membership_start),
        "membershipEnd": iso_or_none(p.membership_end),
        "status": p.status,
    }


def staff_to_json(p: StaffProfile) -> dict:
    return {
        "id": p.staff_id,
        "user": p.user_id,
        "designation": p.designation,
        "salaryType": p.salary_type.value,
        "baseSalary": float(p.base_salary),
        "active": p.active,
    }


def _profile_payload(identity, profile) -> dict:
    payload = {
        "role": identity.role.value,
        "user": {"id": identity.user_id, "name": identity.name, "email": identity.email},
    }
    if isinstance(profile, StudentProfile):
        payload["student"] = student_to_json(profile)
    elif isinstance(profile, StaffProfile):
        payload["staff"] = staff_to_json(profile)
    return payload


def register(app: Flask, container: Container) -> None:
    guard = AuthGuard(container.token_service)

    @app.route("/profile/me", methods=["GET"], endpoint="profile_me")
    @guard.login_required
    def profile_me():
        identity = current_identity()
        try:
            profile = container.profile_service.get_profile(user_id=identity.user_id, role=identity.role)
            return jsonify(_profile_payload(identity, profile))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("fetching profile")

    @app.route("/profile/me/provision", methods=["POST"], endpoint="profile_provision")
    @guard.roles_required(Role.STUDENT, Role.STAFF)
    def profile_provision():
        identity = current_identity()
        try:
            user = container.users_repo.get_by_id(identity.user_id)
            if not user:
                raise NotFoundError("User not found")
            profile = container.profile_service.ensure_for_user(user)
            return jsonify(_profile_payload(identity, profile))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("provisioning profile")
