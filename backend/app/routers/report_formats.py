"""입력 폼(리포트 포맷) 빌더 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.middleware.auth_middleware import get_current_user
from app.models.user import User
from app.schemas.report_format import (
    FormatActionResult,
    NewFieldFormOut,
    QuestionBatchUpdate,
    QuestionCreate,
    ReportFormatOut,
)
from app.services import report_format_service

router = APIRouter(prefix="/api/projects/{project_id}/report-format", tags=["report-format"])


@router.get("", response_model=ReportFormatOut)
def edit_report_format(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return report_format_service.list_fields(db, project_id=project_id, current_user=current_user)


@router.get("/new", response_model=NewFieldFormOut)
def new_field(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return report_format_service.prepare_new_field_defaults(db, project_id=project_id, current_user=current_user)


@router.get("/replacement-input-forms", response_model=NewFieldFormOut)
def replacement_input_forms(
    project_id: int,
    form_type: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return report_format_service.switch_field_type_preview(
        db,
        project_id=project_id,
        form_type=form_type,
        current_user=current_user,
    )


@router.post("", response_model=FormatActionResult)
def create_field(
    project_id: int,
    data: QuestionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return report_format_service.create_field(db, project_id=project_id, data=data, current_user=current_user)


@router.put("", response_model=FormatActionResult)
def update_fields(
    project_id: int,
    data: QuestionBatchUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return report_format_service.update_fields(db, project_id=project_id, data=data, current_user=current_user)


@router.delete("/{question_id}", response_model=FormatActionResult)
def delete_field(
    project_id: int,
    question_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return report_format_service.delete_field(
        db,
        project_id=project_id,
        question_id=question_id,
        current_user=current_user,
    )
