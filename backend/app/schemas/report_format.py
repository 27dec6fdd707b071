"""입력 폼(리포트 포맷) 빌더 요청/응답 계약을 위한 Pydantic 스키마입니다.

요청 스키마는 허용 파라미터 화이트리스트 역할을 하며, 선언되지 않은 키는 버려진다.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


FORM_TABLE_TYPES = ("text_field", "text_area", "date_field", "radio_button", "check_box", "select")


class OptionStringAttributes(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    option_string: Optional[str] = None
    destroy: bool = Field(default=False, alias="_destroy")


class FieldAttributes(BaseModel):
    id: Optional[int] = None
    label_name: Optional[str] = None
    field_type: Optional[str] = None


class RadioButtonAttributes(FieldAttributes):
    radio_button_option_strings_attributes: List[OptionStringAttributes] = Field(default_factory=list)


class CheckBoxAttributes(FieldAttributes):
    check_box_option_strings_attributes: List[OptionStringAttributes] = Field(default_factory=list)


class SelectAttributes(FieldAttributes):
    select_option_strings_attributes: List[OptionStringAttributes] = Field(default_factory=list)


class _VariantAttributesMixin(BaseModel):
    text_field_attributes: Optional[FieldAttributes] = None
    text_area_attributes: Optional[FieldAttributes] = None
    date_field_attributes: Optional[FieldAttributes] = None
    radio_button_attributes: Optional[RadioButtonAttributes] = None
    check_box_attributes: Optional[CheckBoxAttributes] = None
    select_attributes: Optional[SelectAttributes] = None


class QuestionCreate(_VariantAttributesMixin):
    form_table_type: str = "text_field"
    position: Optional[int] = None


class QuestionUpdate(_VariantAttributesMixin):
    form_table_type: Optional[str] = None
    position: Optional[int] = None
    using_flag: Optional[bool] = None


class QuestionBatchUpdate(BaseModel):
    question_attributes: Dict[int, QuestionUpdate] = Field(default_factory=dict)


class OptionStringOut(BaseModel):
    id: Optional[int] = None
    option_string: str = ""


class FieldOut(BaseModel):
    id: Optional[int] = None
    label_name: Optional[str] = None
    field_type: Optional[str] = None
    # 선택형이 아닌 입력 형식은 선택지 목록 자체가 없다(None).
    option_strings: Optional[List[OptionStringOut]] = None


class QuestionOut(BaseModel):
    question_id: int
    project_id: int
    position: int
    form_table_type: str
    using_flag: bool
    field: Optional[FieldOut] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReportFormatOut(BaseModel):
    project_id: int
    project_name: str
    questions: List[QuestionOut] = Field(default_factory=list)


class NewFieldFormOut(BaseModel):
    project_id: int
    position: int
    form_table_type: str
    field: FieldOut


class FieldUpdateOutcome(BaseModel):
    question_id: int
    ok: bool
    errors: List[str] = Field(default_factory=list)


class FormatActionResult(BaseModel):
    level: Literal["notice", "alert"]
    message: str
    redirect_to: str
    errors: List[str] = Field(default_factory=list)
    question: Optional[QuestionOut] = None
    results: List[FieldUpdateOutcome] = Field(default_factory=list)
