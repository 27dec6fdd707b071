"""User 가입 검증 규칙과 계정 헬퍼를 검증하는 자동화 테스트입니다."""

import pytest
from werkzeug.security import check_password_hash, generate_password_hash

from app.models.project import Project
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate
from app.services import mail_service, user_service
from tests.conftest import auth_headers


def _user_data(**overrides) -> UserCreate:
    values = {
        "name": "name",
        "email": "sample1@email.com",
        "password": "password",
        "password_confirmation": "password",
    }
    values.update(overrides)
    return UserCreate(**values)


def _is_valid(db, **overrides) -> bool:
    return user_service.collect_registration_errors(db, _user_data(**overrides)) == []


def _create_user(db, email="test-1@email.com", password="password") -> User:
    user = User(name="name", email=email, encrypted_password=generate_password_hash(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def test_default_user_is_valid(db):
    assert _is_valid(db)


@pytest.mark.parametrize(
    "name, valid",
    [("", False), ("name", True), ("a" * 20, True), ("a" * 21, False)],
)
def test_name_rules(db, name, valid):
    assert _is_valid(db, name=name) is valid


@pytest.mark.parametrize(
    "email, valid",
    [
        ("", False),
        ("sample1@email.com", True),
        ("a" * 90 + "@email.com", True),
        ("a" * 101 + "@email.com", False),
        ("invalid_email", False),
        ("valid@email.com", True),
    ],
)
def test_email_rules(db, email, valid):
    assert _is_valid(db, email=email) is valid


def test_duplicate_email_is_invalid(db):
    _create_user(db, email="test-1@email.com")
    assert not _is_valid(db, email="test-1@email.com")
    assert _is_valid(db, email="test-2@email.com")


def test_duplicate_email_with_different_case_is_invalid(db):
    _create_user(db, email="test-1@email.com")
    assert not _is_valid(db, email="TEST-1@Email.com")


@pytest.mark.parametrize(
    "password, confirmation, valid",
    [
        ("", "", False),
        ("password", "password", True),
        ("a" * 7, "a" * 7, False),
        ("a" * 8, "a" * 8, True),
        ("a" * 30, "a" * 30, True),
        ("a" * 31, "a" * 31, False),
        ("PASSWORD", "PASSWORD", False),
        ("pass1234", "pass1234", True),
        ("password", "passward", False),
    ],
)
def test_password_rules(db, password, confirmation, valid):
    assert _is_valid(db, password=password, password_confirmation=confirmation) is valid


def test_email_is_lowercased_before_save(db):
    user = User(name="name", email="SAMPLE@EMAIL.COM", encrypted_password=generate_password_hash("password"))
    assert user.email == "SAMPLE@EMAIL.COM"
    db.add(user)
    db.commit()
    db.refresh(user)
    assert user.email == "sample@email.com"


def test_is_project_leader(db):
    user = _create_user(db)
    assert user.is_project_leader is False

    db.add(Project(project_name="리더 프로젝트", leader_id=user.user_id))
    db.commit()
    db.refresh(user)
    assert user.is_project_leader is True


def test_send_invite_email_builds_invitation(db, monkeypatch):
    user = _create_user(db)
    sent = []

    def fake_deliver(message, recipients):
        sent.append((message, recipients))
        return True

    monkeypatch.setattr(mail_service, "deliver", fake_deliver)
    assert user.send_invite_email("12345", "테스트유저", "password") is True

    assert len(sent) == 1
    message, recipients = sent[0]
    assert recipients == ["test-1@email.com"]
    assert str(message["Subject"]) == mail_service.INVITATION_SUBJECT
    body = message.get_payload(decode=True).decode("utf-8")
    assert "테스트유저" in body
    assert "password" in body
    assert mail_service.invitation_url("12345") in body


def test_send_invite_email_reports_false_when_mail_disabled(db):
    user = _create_user(db)
    assert user.send_invite_email("token", "name", "password") is False


def test_send_invite_email_reports_false_when_smtp_fails(db, monkeypatch):
    user = _create_user(db)

    def refuse_connection(*args, **kwargs):
        raise ConnectionRefusedError("smtp down")

    monkeypatch.setattr(mail_service.settings, "MAIL_ENABLED", True)
    monkeypatch.setattr(mail_service.smtplib, "SMTP", refuse_connection)
    assert user.send_invite_email("token", "name", "password") is False


def test_update_without_current_password_keeps_password(db):
    user = _create_user(db, password="oldpassword")
    old_encrypted_password = user.encrypted_password

    ok = user_service.update_without_current_password(
        db,
        user,
        UserUpdate(
            email="new-address@email.com",
            password="",
            password_confirmation="",
            current_password="oldpassword",
        ),
    )

    assert ok is True
    db.refresh(user)
    assert user.email == "new-address@email.com"
    assert user.encrypted_password == old_encrypted_password


def test_update_without_current_password_changes_password(db):
    user = _create_user(db, password="oldpassword")
    ok = user_service.update_without_current_password(
        db,
        user,
        UserUpdate(password="newpassword1", password_confirmation="newpassword1"),
    )
    assert ok is True
    db.refresh(user)
    assert check_password_hash(user.encrypted_password, "newpassword1")


def test_update_without_current_password_rejects_invalid(db):
    user = _create_user(db)
    ok = user_service.update_without_current_password(db, user, UserUpdate(email="invalid_email"))
    assert ok is False
    db.refresh(user)
    assert user.email == "test-1@email.com"


def test_register_user_api(client, db):
    resp = client.post(
        "/api/users",
        json={
            "name": "New User",
            "email": "New.User@Email.com",
            "password": "password",
            "password_confirmation": "password",
        },
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["email"] == "new.user@email.com"

    duplicate = client.post(
        "/api/users",
        json={
            "name": "Other",
            "email": "new.user@email.com",
            "password": "password",
            "password_confirmation": "password",
        },
    )
    assert duplicate.status_code == 400


def test_register_user_api_reports_errors(client):
    resp = client.post(
        "/api/users",
        json={"name": "", "email": "invalid_email", "password": "PASSWORD", "password_confirmation": "PASSWORD"},
    )
    assert resp.status_code == 400
    assert len(resp.json()["detail"]) == 3


def test_invite_user_api_sends_email(client, db, seed_users, monkeypatch):
    sent = []
    monkeypatch.setattr(mail_service, "deliver", lambda message, recipients: sent.append(recipients) or True)
    headers = auth_headers(client, "leader@example.com")

    resp = client.post(
        "/api/users/invitations",
        json={"name": "초대자", "email": "Invitee@Email.com"},
        headers=headers,
    )

    assert resp.status_code == 200, resp.text
    assert resp.json()["email"] == "invitee@email.com"
    assert resp.json()["mail_sent"] is True
    assert sent == [["invitee@email.com"]]
    invited = db.query(User).filter(User.email == "invitee@email.com").first()
    assert invited.invitation_token
    assert invited.invited_by_id == seed_users["leader"].user_id


def test_update_me_api(client, seed_users):
    headers = auth_headers(client, "member@example.com")
    resp = client.patch("/api/users/me", json={"name": "Renamed"}, headers=headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["name"] == "Renamed"

    bad = client.patch("/api/users/me", json={"email": "leader@example.com"}, headers=headers)
    assert bad.status_code == 400


def test_invite_user_api_reports_unsent_mail(client, db, seed_users):
    headers = auth_headers(client, "leader@example.com")

    resp = client.post(
        "/api/users/invitations",
        json={"name": "초대자", "email": "invitee@email.com"},
        headers=headers,
    )

    assert resp.status_code == 200, resp.text
    assert resp.json()["mail_sent"] is False
    assert db.query(User).filter(User.email == "invitee@email.com").first() is not None
