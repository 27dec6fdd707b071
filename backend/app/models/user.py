"""User 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, event
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(20), nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    encrypted_password = Column(String(255), nullable=False)
    invitation_token = Column(String(64), unique=True)
    invited_by_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    led_projects = relationship("Project", back_populates="leader")

    @property
    def is_project_leader(self) -> bool:
        return bool(self.led_projects)

    def send_invite_email(self, token: str, name: str, password: str) -> bool:
        from app.services import mail_service

        return mail_service.send_invitation(self, token, name, password)


@event.listens_for(User, "before_insert")
@event.listens_for(User, "before_update")
def _downcase_email(mapper, connection, target: User):
    # 이메일은 항상 소문자로 저장되므로 유일성도 대소문자 구분 없이 적용된다.
    if target.email:
        target.email = target.email.strip().lower()
