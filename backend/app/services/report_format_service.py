"""입력 폼(리포트 포맷) 빌더 서비스 레이어입니다.

프로젝트별 입력 항목(Question)의 등록/편집/삭제와, 입력 형식 토큰에 맞는
하위 레코드 형태를 결정하는 분기 로직을 담당한다. 검증 실패는 예외가 아니라
notice/alert 결과로 돌려주고, 존재하지 않는 리소스만 HTTPException 으로 올린다.
"""

import logging
from typing import Dict, Iterable, Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.project import Project
from app.models.question import (
    FIELD_TYPE_MAX_LENGTH,
    FIELD_VARIANTS,
    LABEL_NAME_MAX_LENGTH,
    OPTION_STRING_MAX_LENGTH,
    FieldVariant,
    Question,
)
from app.models.user import User
from app.schemas.report_format import (
    OptionStringAttributes,
    QuestionBatchUpdate,
    QuestionCreate,
    QuestionUpdate,
)

logger = logging.getLogger(__name__)

DEFAULT_FORM_TABLE_TYPE = "text_field"


def _edit_path(project_id: int) -> str:
    return f"/api/projects/{int(project_id)}/report-format"


def _clean(value: Optional[str]) -> str:
    return str(value or "").strip()


def _clean_optional(value: Optional[str]) -> Optional[str]:
    text = _clean(value)
    return text or None


def _action_result(project_id: int, *, ok: bool, message: str, errors: Optional[list] = None, **extra) -> dict:
    return {
        "level": "notice" if ok else "alert",
        "message": message,
        "redirect_to": _edit_path(project_id),
        "errors": list(errors or []),
        **extra,
    }


def _get_project(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.project_id == int(project_id)).first()
    if not project:
        raise HTTPException(status_code=404, detail="프로젝트를 찾을 수 없습니다.")
    return project


def _get_owned_project(db: Session, project_id: int, current_user: User) -> Project:
    project = _get_project(db, project_id)
    if not project.is_led_by(current_user):
        raise HTTPException(status_code=403, detail="입력 폼 관리는 프로젝트 리더만 가능합니다.")
    return project


def _get_project_question(db: Session, project_id: int, question_id: int) -> Question:
    # 다른 프로젝트의 입력 항목 id 는 존재하지 않는 것으로 취급한다.
    question = (
        db.query(Question)
        .filter(
            Question.question_id == int(question_id),
            Question.project_id == int(project_id),
        )
        .first()
    )
    if not question:
        raise HTTPException(status_code=404, detail="입력 항목을 찾을 수 없습니다.")
    return question


def resolve_variant(form_type: Optional[str]) -> FieldVariant:
    variant = FIELD_VARIANTS.get(_clean(form_type))
    if variant is None:
        raise HTTPException(status_code=400, detail="지원하지 않는 입력 형식입니다.")
    return variant


def next_position(positions: Iterable[Optional[int]]) -> int:
    """마지막(가장 큰) 순서 + 1, 입력 항목이 없으면 1."""
    values = [int(value) for value in positions if value is not None]
    if not values:
        return 1
    return max(values) + 1


def _next_position_for(db: Session, project_id: int) -> int:
    last = db.query(func.max(Question.position)).filter(Question.project_id == int(project_id)).scalar()
    return next_position([last])


def find_position_conflicts(current: Dict[int, int], requested: Dict[int, int]) -> set:
    """일괄 편집 적용 후 같은 순서를 공유하게 되는 요청 항목 id 집합."""
    final = dict(current)
    final.update(requested)
    by_position: Dict[int, list] = {}
    for question_id, position in final.items():
        by_position.setdefault(int(position), []).append(question_id)
    conflicts = set()
    for question_ids in by_position.values():
        if len(question_ids) > 1:
            conflicts.update(qid for qid in question_ids if qid in requested)
    return conflicts


def build_field_shell(form_type: Optional[str]):
    """저장되지 않은 하위 레코드 껍데기. 선택형이면 빈 선택지 1개를 미리 넣는다."""
    variant = resolve_variant(form_type)
    field = variant.model()
    if variant.has_options:
        getattr(field, variant.options_key).append(variant.option_model(option_string=""))
    return field


def serialize_field(variant: FieldVariant, field) -> dict:
    payload = {
        "id": field.id,
        "label_name": field.label_name,
        "field_type": field.field_type,
        "option_strings": None,
    }
    if variant.has_options:
        payload["option_strings"] = [
            {"id": option.id, "option_string": option.option_string or ""}
            for option in getattr(field, variant.options_key)
        ]
    return payload


def serialize_question(question: Question) -> dict:
    variant = question.variant
    field = question.field
    return {
        "question_id": int(question.question_id),
        "project_id": int(question.project_id),
        "position": int(question.position),
        "form_table_type": question.form_table_type,
        "using_flag": bool(question.using_flag),
        "field": serialize_field(variant, field) if variant is not None and field is not None else None,
        "created_at": question.created_at,
        "updated_at": question.updated_at,
    }


def _field_errors(variant: FieldVariant, field) -> list:
    errors = []
    label_name = field.label_name or ""
    if not label_name.strip():
        errors.append("항목명을 입력해 주세요.")
    elif len(label_name) > LABEL_NAME_MAX_LENGTH:
        errors.append(f"항목명은 {LABEL_NAME_MAX_LENGTH}자 이내로 입력해 주세요.")
    if field.field_type and len(field.field_type) > FIELD_TYPE_MAX_LENGTH:
        errors.append(f"필드 유형은 {FIELD_TYPE_MAX_LENGTH}자 이내로 입력해 주세요.")
    if variant.has_options:
        for option in getattr(field, variant.options_key):
            text = option.option_string or ""
            if not text.strip():
                errors.append("선택지는 비워둘 수 없습니다.")
            elif len(text) > OPTION_STRING_MAX_LENGTH:
                errors.append(f"선택지는 {OPTION_STRING_MAX_LENGTH}자 이내로 입력해 주세요.")
    return errors


def _foreign_variant_blocks(variant: FieldVariant, data) -> list:
    return [
        other.attributes_key
        for other in FIELD_VARIANTS.values()
        if other.key != variant.key and getattr(data, other.attributes_key) is not None
    ]


def list_fields(db: Session, *, project_id: int, current_user: User) -> dict:
    project = _get_owned_project(db, project_id, current_user)
    questions = (
        db.query(Question)
        .filter(Question.project_id == project.project_id)
        .order_by(Question.position.asc(), Question.question_id.asc())
        .all()
    )
    return {
        "project_id": int(project.project_id),
        "project_name": project.project_name,
        "questions": [serialize_question(row) for row in questions],
    }


def _new_field_form(project: Project, position: int, form_type: str) -> dict:
    variant = resolve_variant(form_type)
    return {
        "project_id": int(project.project_id),
        "position": position,
        "form_table_type": variant.key,
        "field": serialize_field(variant, build_field_shell(variant.key)),
    }


def prepare_new_field_defaults(db: Session, *, project_id: int, current_user: User) -> dict:
    project = _get_owned_project(db, project_id, current_user)
    return _new_field_form(project, _next_position_for(db, project.project_id), DEFAULT_FORM_TABLE_TYPE)


def switch_field_type_preview(db: Session, *, project_id: int, form_type: str, current_user: User) -> dict:
    project = _get_owned_project(db, project_id, current_user)
    resolve_variant(form_type)
    return _new_field_form(project, _next_position_for(db, project.project_id), form_type)


def _build_options(variant: FieldVariant, field, rows: list[OptionStringAttributes]):
    options = getattr(field, variant.options_key)
    for row in rows:
        if row.destroy:
            continue
        text = _clean(row.option_string)
        if not text:
            continue
        options.append(variant.option_model(option_string=text))


def create_field(db: Session, *, project_id: int, data: QuestionCreate, current_user: User) -> dict:
    project = _get_owned_project(db, project_id, current_user)
    failure_message = "입력 폼 신규 등록에 실패했습니다."

    variant = FIELD_VARIANTS.get(_clean(data.form_table_type))
    if variant is None:
        return _action_result(project.project_id, ok=False, message=failure_message, errors=["지원하지 않는 입력 형식입니다."])
    attrs = getattr(data, variant.attributes_key)
    if attrs is None:
        return _action_result(project.project_id, ok=False, message=failure_message, errors=["입력 항목 정보가 없습니다."])
    if _foreign_variant_blocks(variant, data):
        return _action_result(
            project.project_id,
            ok=False,
            message=failure_message,
            errors=["입력 형식과 일치하지 않는 항목 정보가 포함되어 있습니다."],
        )

    errors = []
    position = data.position if data.position is not None else _next_position_for(db, project.project_id)
    if int(position) < 1:
        errors.append("순서는 1 이상이어야 합니다.")
    elif (
        db.query(Question)
        .filter(Question.project_id == project.project_id, Question.position == int(position))
        .first()
    ):
        errors.append("이미 사용 중인 순서입니다.")

    field = variant.model(label_name=_clean(attrs.label_name), field_type=_clean_optional(attrs.field_type))
    if variant.has_options:
        _build_options(variant, field, getattr(attrs, variant.options_attributes_key))
    errors.extend(_field_errors(variant, field))
    if errors:
        logger.warning("[report_format] create rejected project_id=%s errors=%s", project.project_id, errors)
        return _action_result(project.project_id, ok=False, message=failure_message, errors=errors)

    question = Question(
        project_id=project.project_id,
        position=int(position),
        form_table_type=variant.key,
        using_flag=True,
    )
    setattr(question, variant.key, field)
    db.add(question)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("[report_format] create failed project_id=%s: %s", project.project_id, exc)
        return _action_result(project.project_id, ok=False, message=failure_message, errors=["저장 중 오류가 발생했습니다."])
    db.refresh(question)
    logger.info(
        "[report_format] created question_id=%s project_id=%s type=%s",
        question.question_id,
        project.project_id,
        variant.key,
    )
    return _action_result(
        project.project_id,
        ok=True,
        message="입력 폼을 신규 등록했습니다.",
        question=serialize_question(question),
    )


def _apply_option_changes(variant: FieldVariant, field, rows: list[OptionStringAttributes]) -> list:
    errors = []
    options = getattr(field, variant.options_key)
    by_id = {int(option.id): option for option in options if option.id is not None}
    for row in rows:
        if row.id is None:
            if row.destroy:
                continue
            text = _clean(row.option_string)
            if text:
                options.append(variant.option_model(option_string=text))
            continue
        option = by_id.get(int(row.id))
        if option is None:
            errors.append(f"선택지(id={row.id})를 찾을 수 없습니다.")
            continue
        if row.destroy:
            # delete-orphan 이므로 컬렉션에서 빠지면 레코드도 삭제된다.
            options.remove(option)
            continue
        if "option_string" in row.model_fields_set:
            option.option_string = _clean(row.option_string)
    return errors


def _apply_question_update(question: Question, attrs: QuestionUpdate) -> list:
    variant = question.variant
    if variant is None:
        return ["입력 형식 정보가 올바르지 않습니다."]
    if attrs.form_table_type is not None and _clean(attrs.form_table_type) != question.form_table_type:
        return ["입력 형식은 변경할 수 없습니다."]
    if _foreign_variant_blocks(variant, attrs):
        return ["입력 형식과 일치하지 않는 항목 정보가 포함되어 있습니다."]

    errors = []
    if attrs.position is not None:
        if int(attrs.position) < 1:
            errors.append("순서는 1 이상이어야 합니다.")
        else:
            question.position = int(attrs.position)
    if attrs.using_flag is not None:
        question.using_flag = bool(attrs.using_flag)

    field_attrs = getattr(attrs, variant.attributes_key)
    field = question.field
    if field_attrs is not None:
        if field is None:
            field = variant.model()
            setattr(question, variant.key, field)
        elif field_attrs.id is not None and int(field_attrs.id) != int(field.id):
            errors.append("항목 정보가 올바르지 않습니다.")
        fields_set = field_attrs.model_fields_set
        if "label_name" in fields_set:
            field.label_name = _clean(field_attrs.label_name)
        if "field_type" in fields_set:
            field.field_type = _clean_optional(field_attrs.field_type)
        if variant.has_options:
            errors.extend(_apply_option_changes(variant, field, getattr(field_attrs, variant.options_attributes_key)))
    if field is not None:
        errors.extend(_field_errors(variant, field))
    return errors


def _settle_position_conflicts(current_positions: Dict[int, int], items: dict, errors_by_id: Dict[int, list]) -> None:
    # 실패한 항목은 기존 순서에 남으므로, 충돌이 더 생기지 않을 때까지 다시 계산한다.
    while True:
        requested = {
            int(question_id): int(attrs.position)
            for question_id, attrs in items.items()
            if attrs.position is not None and not errors_by_id[int(question_id)]
        }
        conflicts = find_position_conflicts(current_positions, requested)
        if not conflicts:
            return
        for question_id in conflicts:
            errors_by_id[question_id].append("다른 입력 항목과 순서가 중복됩니다.")


def update_fields(db: Session, *, project_id: int, data: QuestionBatchUpdate, current_user: User) -> dict:
    """여러 입력 항목을 한 번에 갱신한다. 항목별로 성공/실패를 따로 보고한다.

    라벨/필수 여부 같은 항목 정보는 질문 최상위가 아니라 ``<형식>_attributes``
    (예: ``text_field_attributes.label_name``) 아래에 넣어야 반영된다. 최상위에 둔
    알 수 없는 키는 무시된다.

    먼저 모든 항목을 저장 없이 검증하고, 통과한 항목만으로 순서 중복을 다시
    계산한 뒤 남은 항목만 커밋한다. 그래서 맞바꾸기의 한쪽이 실패하면 다른 쪽도
    실패로 처리되어 같은 순서를 공유하는 항목이 생기지 않는다.
    """
    project = _get_owned_project(db, project_id, current_user)
    items = data.question_attributes
    questions = {
        int(question_id): _get_project_question(db, project.project_id, question_id)
        for question_id in items
    }
    current_positions = {
        int(row.question_id): int(row.position)
        for row in db.query(Question.question_id, Question.position)
        .filter(Question.project_id == project.project_id)
        .all()
    }

    errors_by_id = {
        int(question_id): _apply_question_update(questions[int(question_id)], attrs)
        for question_id, attrs in items.items()
    }
    # 검증용으로 바꾼 값은 모두 버리고, 통과한 항목만 아래에서 다시 적용한다.
    db.rollback()
    _settle_position_conflicts(current_positions, items, errors_by_id)

    results = []
    for question_id, attrs in items.items():
        question_id = int(question_id)
        errors = errors_by_id[question_id]
        if not errors:
            errors = _apply_question_update(questions[question_id], attrs)
            if errors:
                db.rollback()
            else:
                try:
                    db.commit()
                except SQLAlchemyError as exc:
                    db.rollback()
                    logger.warning("[report_format] update failed question_id=%s: %s", question_id, exc)
                    errors = ["저장 중 오류가 발생했습니다."]
        if errors:
            logger.warning("[report_format] update rejected question_id=%s errors=%s", question_id, errors)
        results.append({"question_id": question_id, "ok": not errors, "errors": errors})

    failed = [row for row in results if not row["ok"]]
    if failed:
        return _action_result(
            project.project_id,
            ok=False,
            message=f"입력 항목 {len(failed)}건의 갱신에 실패했습니다.",
            results=results,
        )
    return _action_result(project.project_id, ok=True, message="입력 항목의 데이터를 갱신했습니다.", results=results)


def delete_field(db: Session, *, project_id: int, question_id: int, current_user: User) -> dict:
    project = _get_owned_project(db, project_id, current_user)
    question = _get_project_question(db, project.project_id, question_id)
    try:
        db.delete(question)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("[report_format] delete failed question_id=%s: %s", question_id, exc)
        return _action_result(project.project_id, ok=False, message="입력 폼 삭제에 실패했습니다.")
    logger.info("[report_format] deleted question_id=%s project_id=%s", question_id, project.project_id)
    return _action_result(project.project_id, ok=True, message="입력 폼을 삭제했습니다.")
