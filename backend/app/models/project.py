"""Project 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Project(Base):
    __tablename__ = "projects"

    project_id = Column(Integer, primary_key=True, autoincrement=True)
    project_name = Column(String(200), nullable=False)
    description = Column(Text)
    leader_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    leader = relationship("User", back_populates="led_projects")
    questions = relationship(
        "Question",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Question.position.asc(), Question.question_id.asc()",
    )

    __table_args__ = (
        Index("idx_project_leader", "leader_id"),
    )

    def is_led_by(self, user) -> bool:
        return user is not None and self.leader_id == user.user_id
