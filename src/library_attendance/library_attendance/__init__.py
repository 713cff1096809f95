"""Library Attendance package.

Feature modules (identity, attendance, qr_sessions, faces, payroll, ...) each keep
a thin Flask controller on top of service and repository layers.
"""
