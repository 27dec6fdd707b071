"""Mail Service 레이어입니다. 초대 메일 본문을 만들고 SMTP 로 발송합니다."""

import logging
import smtplib
from email.header import Header
from email.mime.text import MIMEText

from app.config import settings

logger = logging.getLogger(__name__)

INVITATION_SUBJECT = "[Report Format] 프로젝트 초대 안내"


def invitation_url(token: str) -> str:
    return f"{settings.APP_BASE_URL.rstrip('/')}/invitations/{token}"


def build_invitation_message(user, token: str, name: str, password: str) -> MIMEText:
    body = (
        f"{name}님, 프로젝트에 초대되었습니다.\n\n"
        f"로그인 이메일: {user.email}\n"
        f"임시 비밀번호: {password}\n\n"
        "아래 링크에서 초대를 수락해 주세요.\n"
        f"{invitation_url(token)}\n"
    )
    message = MIMEText(body, "plain", "utf-8")
    message["Subject"] = Header(INVITATION_SUBJECT, "utf-8")
    message["From"] = settings.MAIL_FROM
    message["To"] = user.email
    return message


def deliver(message: MIMEText, recipients: list[str]) -> bool:
    if not settings.MAIL_ENABLED:
        logger.info("[mail] delivery disabled, skipped to=%s subject=%s", recipients, message["Subject"])
        return False
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as connection:
        if settings.SMTP_STARTTLS:
            connection.starttls()
        if settings.SMTP_USER:
            connection.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
        connection.sendmail(settings.MAIL_FROM, recipients, message.as_string())
    return True


def send_invitation(user, token: str, name: str, password: str) -> bool:
    message = build_invitation_message(user, token, name, password)
    try:
        return deliver(message, [user.email])
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("[mail] invitation delivery failed to=%s: %s", user.email, exc)
        return False
