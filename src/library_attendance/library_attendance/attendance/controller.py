from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..common.datetime_utils import iso_or_none, now_local, parse_iso_date
from ..common.http import domain_error, json_body, server_error
from ..common.validators import require_bool
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from ..identity.guards import AuthGuard, current_identity
from .model import AttendanceRecord

CSV_FIELDS = ["id", "date", "user", "student", "role", "status", "method", "check_in", "lat", "lng", "address"]


def record_to_json(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "user": r.user_id,
        "role": r.role.value,
        "student": r.student_id,
        "date": iso_or_none(r.work_date),
        "checkInTime": iso_or_none(r.check_in_time),
        "method": r.method.value if r.method else None,
        "location": (
            {"lat": r.location.lat, "lng": r.location.lng, "address": r.location.address}
            if r.location
            else None
        ),
        "status": r.status.value,
    }


def _record_to_csv_row(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "date": r.work_date.strftime("%Y-%m-%d"),
        "user": r.user_id or "",
        "student": r.student_id or "",
        "role": r.role.value,
        "status": r.status.value,
        "method": r.method.value if r.method else "",
        "check_in": r.check_in_time.strftime("%H:%M:%S") if r.check_in_time else "-",
        "lat": r.location.lat if r.location else "",
        "lng": r.location.lng if r.location else "",
        "address": (r.location.address or "") if r.location else "",
    }


def register(app: Flask, container: Container) -> None:
    guard = AuthGuard(container.token_service)

    def _day_param():
        value = request.args.get("date")
        return parse_iso_date(value) if value else now_local().date()

    @app.route("/attendance/qr", methods=["POST"], endpoint="attendance_qr")
    @guard.roles_required(Role.STUDENT, Role.STAFF)
    def attendance_qr():
        try:
            data = json_body()
            qr_token = data.get("qrToken")
            if not qr_token or not isinstance(qr_token, str):
                raise ValidationError("QR token is required")

            outcome = container.attendance_service.submit_qr(
                current_identity(),
                qr_token=qr_token,
                location=data.get("location"),
            )
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("marking QR attendance")

        if outcome.already_marked:
            return (
                jsonify({"error": "Attendance already marked for today", "attendance": record_to_json(outcome.record)}),
                409,
            )
        return (
            jsonify(
                {
                    "message": "Attendance marked successfully",
                    "attendance": record_to_json(outcome.record),
                    "qrValid": True,
                }
            ),
            201,
        )

    @app.route("/attendance/self", methods=["POST"], endpoint="attendance_self")
    @guard.roles_required(Role.STUDENT, Role.STAFF)
    def attendance_self():
        try:
            data = json_body()
            outcome = container.attendance_service.submit_self(
                current_identity(),
                location=data.get("location"),
                face_match=require_bool(data.get("faceMatch"), "faceMatch"),
                face_descriptor=data.get("faceDescriptor"),
            )
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("marking self attendance")

        if outcome.requires_face_verification:
            return jsonify({"requiresFaceVerification": True}), 200
        return jsonify(record_to_json(outcome.record)), 201

    @app.route("/attendance/me", methods=["GET"], endpoint="attendance_me")
    @guard.roles_required(Role.STUDENT, Role.STAFF)
    def attendance_me():
        try:
            limit = request.args.get("limit", type=int)
            records = container.attendance_service.history(current_identity(), limit=limit)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("fetching own attendance")

        return jsonify([record_to_json(r) for r in records])

    @app.route("/attendance", methods=["GET"], endpoint="attendance_list")
    @guard.roles_required(Role.ADMIN)
    def attendance_list():
        try:
            records = container.attendance_service.list_for_date(_day_param())
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("listing attendance")

        return jsonify([record_to_json(r) for r in records])

    @app.route("/attendance", methods=["POST"], endpoint="attendance_override")
    @guard.roles_required(Role.ADMIN)
    def attendance_override():
        try:
            data = json_body()
            day = parse_iso_date(data["date"]) if data.get("date") else now_local().date()
            record = container.attendance_service.set_attendance(
                student_ref=data.get("student"),
                work_date=day,
                status=data.get("status"),
            )
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("overriding attendance")

        return jsonify(record_to_json(record))

    @app.route("/attendance/export.csv", methods=["GET"], endpoint="attendance_export_csv")
    @guard.roles_required(Role.ADMIN)
    def attendance_export_csv():
        try:
            day = _day_param()
            records = container.attendance_service.list_for_date(day)
        except DomainError as e:
            return domain_error(e)
        except Exception:
            return server_error("exporting attendance")

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for r in records:
            writer.writerow(_record_to_csv_row(r))

        filename = f"attendance_{day.strftime('%Y%m%d')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
