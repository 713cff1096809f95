def test_issue_reuse_and_validate(client, auth_headers, people):
    admin = auth_headers(people.admin)

    first = client.post("/qr-sessions", json={"locationRequired": True}, headers=admin)
    assert first.status_code == 201
    token = first.get_json()["qrToken"]
    assert len(token) == 32

    reused = client.post("/qr-sessions", json={}, headers=admin)
    assert reused.status_code == 200
    assert reused.get_json()["qrToken"] == token

    valid = client.post("/qr-sessions/validate", json={"qrToken": token})
    assert valid.status_code == 200
    assert valid.get_json()["valid"] is True
    assert valid.get_json()["locationRequired"] is True

    assert client.post("/qr-sessions/validate", json={"qrToken": "nope"}).status_code == 400
    assert client.post("/qr-sessions", json={"expiresInSeconds": 0}, headers=admin).status_code == 400
    assert client.post("/qr-sessions", json={}, headers=auth_headers(people.staff)).status_code == 403


def test_active_session_and_image(client, auth_headers, people):
    admin = auth_headers(people.admin)

    assert client.get("/qr-sessions/active", headers=admin).get_json()["active"] is False
    assert client.get("/qr-sessions/active/image", headers=admin).status_code == 404

    token = client.post("/qr-sessions", json={}, headers=admin).get_json()["qrToken"]
    active = client.get("/qr-sessions/active", headers=admin).get_json()
    assert active["active"] is True
    assert active["qrToken"] == token
    assert active["createdAt"]

    image = client.get("/qr-sessions/active/image", headers=admin)
    assert image.status_code == 200
    assert image.mimetype == "image/png"
    assert image.data.startswith(b"\x89PNG")


def test_face_register_verify_status(client, auth_headers, people):
    headers = auth_headers(people.staff)

    assert client.get("/auth/face-status", headers=headers).get_json() == {
        "faceRegistered": False,
        "registrationDate": None,
    }
    assert client.post("/auth/verify-face", json={"faceDescriptor": [0.0] * 128}, headers=headers).status_code == 400
    assert client.post("/auth/register-face", json={"faceDescriptor": [0.0] * 127}, headers=headers).status_code == 400

    registered = client.post("/auth/register-face", json={"faceDescriptor": [0.0] * 128}, headers=headers)
    assert registered.status_code == 200
    assert registered.get_json()["faceRegistered"] is True

    verdict = client.post("/auth/verify-face", json={"faceDescriptor": [0.0] * 128}, headers=headers).get_json()
    assert verdict == {"verified": True, "confidence": 1.0, "distance": 0.0, "threshold": 0.6}

    assert client.get("/auth/face-status", headers=headers).get_json()["faceRegistered"] is True


def test_login_cookie_signup_and_profile(client, people):
    login = client.post("/auth/login", json={"email": "student@library.local", "password": "secret123"})
    assert login.status_code == 200
    assert login.get_json()["user"]["role"] == "Student"
    assert any(c.startswith("session=") for c in login.headers.getlist("Set-Cookie"))

    # the cookie alone authenticates follow-up requests
    profile = client.get("/profile/me")
    assert profile.status_code == 200
    assert profile.get_json()["student"]["id"] == people.student_profile.student_id

    assert client.post("/auth/logout").status_code == 200
    assert client.post("/auth/login", json={"email": "student@library.local", "password": "x"}).status_code == 401

    signup = client.post("/auth/signup", json={"name": "Kim", "email": "kim@x.io", "password": "secret1", "role": "Staff"})
    assert signup.status_code == 201
    assert signup.get_json()["user"]["role"] == "Staff"


def test_profile_provision_is_explicit(client, auth_headers, repos):
    from src.library_attendance.library_attendance.core.enums import Role
    from src.library_attendance.library_attendance.identity.model import Identity

    user = repos.users_repo.add(name="Late", email="late@x.io", role=Role.STAFF)
    headers = auth_headers(Identity(user_id=user.user_id, role=Role.STAFF, name=user.name, email=user.email))

    assert client.get("/profile/me", headers=headers).status_code == 404
    provisioned = client.post("/profile/me/provision", headers=headers)
    assert provisioned.status_code == 200
    assert provisioned.get_json()["staff"]["salaryType"] == "Monthly"
    assert client.get("/profile/me", headers=headers).status_code == 200
