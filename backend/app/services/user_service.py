"""User Service 도메인 서비스 레이어입니다. 회원 가입 검증 규칙과 계정 갱신/초대 흐름을 캡슐화합니다."""

import logging
import re
import secrets
import string

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.security import generate_password_hash

from app.models.user import User
from app.schemas.user import UserCreate, UserInvite, UserUpdate

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 20
EMAIL_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 30
INVITE_PASSWORD_LENGTH = 12

EMAIL_PATTERN = re.compile(r"^[\w+\-.]+@[a-z\d\-.]+\.[a-z]+$", re.IGNORECASE)
# 비밀번호는 영문 소문자와 숫자만 허용한다.
PASSWORD_PATTERN = re.compile(r"^[a-z0-9]+$")


def _name_errors(name: str | None) -> list[str]:
    text = str(name or "").strip()
    if not text:
        return ["이름을 입력해 주세요."]
    if len(text) > NAME_MAX_LENGTH:
        return [f"이름은 {NAME_MAX_LENGTH}자 이내로 입력해 주세요."]
    return []


def _email_taken(db: Session, email: str, exclude_user_id: int | None = None) -> bool:
    query = db.query(User).filter(User.email == email.lower())
    if exclude_user_id is not None:
        query = query.filter(User.user_id != int(exclude_user_id))
    return query.first() is not None


def _email_errors(db: Session, email: str | None, exclude_user_id: int | None = None) -> list[str]:
    text = str(email or "").strip()
    if not text:
        return ["이메일을 입력해 주세요."]
    if len(text) > EMAIL_MAX_LENGTH:
        return [f"이메일은 {EMAIL_MAX_LENGTH}자 이내로 입력해 주세요."]
    if not EMAIL_PATTERN.match(text):
        return ["이메일 형식이 올바르지 않습니다."]
    if _email_taken(db, text, exclude_user_id=exclude_user_id):
        return ["이미 사용 중인 이메일입니다."]
    return []


def _password_errors(password: str | None, password_confirmation: str | None) -> list[str]:
    value = password or ""
    if not value:
        return ["비밀번호를 입력해 주세요."]
    errors = []
    if len(value) < PASSWORD_MIN_LENGTH or len(value) > PASSWORD_MAX_LENGTH:
        errors.append(f"비밀번호는 {PASSWORD_MIN_LENGTH}~{PASSWORD_MAX_LENGTH}자로 입력해 주세요.")
    if not PASSWORD_PATTERN.match(value):
        errors.append("비밀번호는 영문 소문자와 숫자만 사용할 수 있습니다.")
    if value != (password_confirmation or ""):
        errors.append("비밀번호 확인이 일치하지 않습니다.")
    return errors


def collect_registration_errors(db: Session, data: UserCreate) -> list[str]:
    return (
        _name_errors(data.name)
        + _email_errors(db, data.email)
        + _password_errors(data.password, data.password_confirmation)
    )


def _strip_blank_password(data: UserUpdate) -> dict:
    payload = data.model_dump(exclude_unset=True)
    payload.pop("current_password", None)
    if not payload.get("password") and not payload.get("password_confirmation"):
        payload.pop("password", None)
        payload.pop("password_confirmation", None)
    return payload


def collect_update_errors(db: Session, user: User, data: UserUpdate) -> list[str]:
    payload = _strip_blank_password(data)
    errors = []
    if "name" in payload:
        errors.extend(_name_errors(payload["name"]))
    if "email" in payload:
        errors.extend(_email_errors(db, payload["email"], exclude_user_id=user.user_id))
    if "password" in payload or "password_confirmation" in payload:
        errors.extend(_password_errors(payload.get("password"), payload.get("password_confirmation")))
    return errors


def _commit_user(db: Session, user: User) -> User:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=409, detail="이미 사용 중인 이메일입니다.") from exc
    db.refresh(user)
    return user


def register_user(db: Session, data: UserCreate) -> User:
    errors = collect_registration_errors(db, data)
    if errors:
        raise HTTPException(status_code=400, detail=errors)
    user = User(
        name=data.name.strip(),
        email=data.email.strip(),
        encrypted_password=generate_password_hash(data.password),
        is_active=True,
    )
    db.add(user)
    return _commit_user(db, user)


def update_without_current_password(db: Session, user: User, data: UserUpdate) -> bool:
    """현재 비밀번호 확인 없이 계정 정보를 갱신한다. 비밀번호가 비어 있으면 기존 값을 유지한다."""
    if collect_update_errors(db, user, data):
        return False
    payload = _strip_blank_password(data)
    if "name" in payload:
        user.name = str(payload["name"]).strip()
    if "email" in payload:
        user.email = str(payload["email"]).strip()
    if payload.get("password"):
        user.encrypted_password = generate_password_hash(payload["password"])
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    db.refresh(user)
    return True


def update_profile(db: Session, user: User, data: UserUpdate) -> User:
    errors = collect_update_errors(db, user, data)
    if errors:
        raise HTTPException(status_code=400, detail=errors)
    if not update_without_current_password(db, user, data):
        raise HTTPException(status_code=409, detail="계정 정보를 갱신하지 못했습니다.")
    return user


def _generate_invite_password() -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(INVITE_PASSWORD_LENGTH))


def invite_user(db: Session, data: UserInvite, inviter: User) -> tuple[User, bool]:
    """초대 계정을 만들고 초대 메일을 보낸다. 메일 발송 실패는 계정 생성을 되돌리지 않는다."""
    errors = _name_errors(data.name) + _email_errors(db, data.email)
    if errors:
        raise HTTPException(status_code=400, detail=errors)
    password = _generate_invite_password()
    token = secrets.token_urlsafe(24)
    user = User(
        name=data.name.strip(),
        email=data.email.strip(),
        encrypted_password=generate_password_hash(password),
        invitation_token=token,
        invited_by_id=inviter.user_id,
        is_active=True,
    )
    db.add(user)
    _commit_user(db, user)
    logger.info("[users] invited user_id=%s by user_id=%s", user.user_id, inviter.user_id)
    mail_sent = user.send_invite_email(token, user.name, password)
    if not mail_sent:
        logger.warning("[users] invitation mail not sent user_id=%s", user.user_id)
    return user, mail_sent
