"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from app.models.user import User
from app.models.project import Project
from app.models.question import (
    FIELD_VARIANTS,
    CheckBox,
    CheckBoxOptionString,
    DateField,
    FieldVariant,
    Question,
    RadioButton,
    RadioButtonOptionString,
    Select,
    SelectOptionString,
    TextArea,
    TextField,
)

__all__ = [
    "User",
    "Project",
    "Question",
    "TextField", "TextArea", "DateField",
    "RadioButton", "CheckBox", "Select",
    "RadioButtonOptionString", "CheckBoxOptionString", "SelectOptionString",
    "FieldVariant", "FIELD_VARIANTS",
]
