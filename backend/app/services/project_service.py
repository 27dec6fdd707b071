"""Project Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.models.project import Project
from app.models.user import User
from app.schemas.project import ProjectCreate


def create_project(db: Session, data: ProjectCreate, current_user: User) -> Project:
    project = Project(
        project_name=data.project_name.strip(),
        description=data.description,
        leader_id=current_user.user_id,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


def list_led_projects(db: Session, current_user: User) -> List[Project]:
    return (
        db.query(Project)
        .filter(Project.leader_id == current_user.user_id)
        .order_by(Project.created_at.desc(), Project.project_id.desc())
        .all()
    )


def get_project(db: Session, project_id: int, current_user: User) -> Project:
    project = db.query(Project).filter(Project.project_id == project_id).first()
    if not project:
        raise HTTPException(status_code=404, detail="프로젝트를 찾을 수 없습니다.")
    if not project.is_led_by(current_user):
        raise HTTPException(status_code=403, detail="이 프로젝트에 접근할 권한이 없습니다.")
    return project
