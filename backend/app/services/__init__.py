"""서비스 레이어 패키지 초기화 모듈입니다."""

from app.services import (
    auth_service,
    mail_service,
    project_service,
    report_format_service,
    user_service,
)
