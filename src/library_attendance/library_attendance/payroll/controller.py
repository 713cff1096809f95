from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import domain_error, json_body, server_error
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from ..identity.guards import AuthGuard, current_identity
from .model import SalaryRecord


def salary_to_json(s: SalaryRecord) -> dict:
    return {
        "id": s.salary_id,
        "staff": s.staff_id,
        "month": s.month,
        "presentDays": s.present_days,
        "amount": float(s.amount),
        "status": s.status.value,
    }


def _staff_ids(value):
    if value is None:
        return None
    if not isinstance(value, list) or any(isinstance(v, bool) or not isinstance(v, int) for v in value):
        raise ValidationError("staffIds must be a list of ids")
    return value


def register(app: Flask, container: Container) -> None:
    guard = AuthGuard(container.token_service)

    @app.route("/salary/calculate", methods=["POST"], endpoint="salary_calculate")
    @guard.roles_required(Role.ADMIN)
    def salary_calculate():
        try:
            data = json_body()
            records = container.payroll_service.calculate(data.get("month"), _staff_ids(data.get("staffIds")))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("calculating salaries")

        return jsonify([salary_to_json(s) for s in records])

    @app.route("/salary", methods=["GET"], endpoint="salary_list")
    @guard.roles_required(Role.ADMIN)
    def salary_list():
        try:
            records = container.payroll_service.list_for_month(request.args.get("month", ""))
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("listing salaries")

        return jsonify([salary_to_json(s) for s in records])

    @app.route("/salary/<int:salary_id>/pay", methods=["POST"], endpoint="salary_pay")
    @guard.roles_required(Role.ADMIN)
    def salary_pay(salary_id: int):
        try:
            record = container.payroll_service.mark_paid(salary_id)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("marking salary paid")

        return jsonify(salary_to_json(record))

    @app.route("/salary/me", methods=["GET"], endpoint="salary_me")
    @guard.roles_required(Role.STAFF)
    def salary_me():
        try:
            records = container.payroll_service.list_for_user(current_identity().user_id)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("fetching own salaries")

        return jsonify([salary_to_json(s) for s in records])
