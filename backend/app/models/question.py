"""입력 폼(Question)과 입력 형식별 하위 레코드 SQLAlchemy 모델입니다.

Question 하나는 form_table_type 값과 일치하는 하위 레코드(TextField, TextArea,
DateField, RadioButton, CheckBox, Select) 하나만 가진다. 선택형 하위 레코드는
선택지(OptionString) 목록을 순서대로 보유한다.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import declared_attr, relationship
from sqlalchemy.sql import func

from app.database import Base


LABEL_NAME_MAX_LENGTH = 100
FIELD_TYPE_MAX_LENGTH = 20
OPTION_STRING_MAX_LENGTH = 100


class Question(Base):
    __tablename__ = "questions"

    question_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=1)
    form_table_type = Column(String(20), nullable=False, default="text_field")
    using_flag = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    project = relationship("Project", back_populates="questions")
    text_field = relationship("TextField", back_populates="question", uselist=False, cascade="all, delete-orphan")
    text_area = relationship("TextArea", back_populates="question", uselist=False, cascade="all, delete-orphan")
    date_field = relationship("DateField", back_populates="question", uselist=False, cascade="all, delete-orphan")
    radio_button = relationship("RadioButton", back_populates="question", uselist=False, cascade="all, delete-orphan")
    check_box = relationship("CheckBox", back_populates="question", uselist=False, cascade="all, delete-orphan")
    select = relationship("Select", back_populates="question", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_question_project_position", "project_id", "position"),
    )

    @property
    def variant(self) -> Optional["FieldVariant"]:
        return FIELD_VARIANTS.get(self.form_table_type)

    @property
    def field(self):
        variant = self.variant
        if variant is None:
            return None
        return getattr(self, variant.key)


class _FieldColumns:
    """여섯 가지 입력 형식 하위 레코드가 공유하는 컬럼."""

    id = Column(Integer, primary_key=True, autoincrement=True)
    label_name = Column(String(LABEL_NAME_MAX_LENGTH), nullable=False)
    field_type = Column(String(FIELD_TYPE_MAX_LENGTH))
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    @declared_attr
    def question_id(cls):
        return Column(
            Integer,
            ForeignKey("questions.question_id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        )


class _OptionColumns:
    id = Column(Integer, primary_key=True, autoincrement=True)
    option_string = Column(String(OPTION_STRING_MAX_LENGTH), nullable=False, default="")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())


class TextField(_FieldColumns, Base):
    __tablename__ = "text_fields"

    question = relationship("Question", back_populates="text_field")


class TextArea(_FieldColumns, Base):
    __tablename__ = "text_areas"

    question = relationship("Question", back_populates="text_area")


class DateField(_FieldColumns, Base):
    __tablename__ = "date_fields"

    question = relationship("Question", back_populates="date_field")


class RadioButton(_FieldColumns, Base):
    __tablename__ = "radio_buttons"

    question = relationship("Question", back_populates="radio_button")
    radio_button_option_strings = relationship(
        "RadioButtonOptionString",
        back_populates="radio_button",
        cascade="all, delete-orphan",
        order_by="RadioButtonOptionString.id.asc()",
    )


class CheckBox(_FieldColumns, Base):
    __tablename__ = "check_boxes"

    question = relationship("Question", back_populates="check_box")
    check_box_option_strings = relationship(
        "CheckBoxOptionString",
        back_populates="check_box",
        cascade="all, delete-orphan",
        order_by="CheckBoxOptionString.id.asc()",
    )


class Select(_FieldColumns, Base):
    __tablename__ = "selects"

    question = relationship("Question", back_populates="select")
    select_option_strings = relationship(
        "SelectOptionString",
        back_populates="select",
        cascade="all, delete-orphan",
        order_by="SelectOptionString.id.asc()",
    )


class RadioButtonOptionString(_OptionColumns, Base):
    __tablename__ = "radio_button_option_strings"

    radio_button_id = Column(Integer, ForeignKey("radio_buttons.id", ondelete="CASCADE"), nullable=False)

    radio_button = relationship("RadioButton", back_populates="radio_button_option_strings")


class CheckBoxOptionString(_OptionColumns, Base):
    __tablename__ = "check_box_option_strings"

    check_box_id = Column(Integer, ForeignKey("check_boxes.id", ondelete="CASCADE"), nullable=False)

    check_box = relationship("CheckBox", back_populates="check_box_option_strings")


class SelectOptionString(_OptionColumns, Base):
    __tablename__ = "select_option_strings"

    select_id = Column(Integer, ForeignKey("selects.id", ondelete="CASCADE"), nullable=False)

    select = relationship("Select", back_populates="select_option_strings")


@dataclass(frozen=True)
class FieldVariant:
    """form_table_type 값 하나에 대응하는 하위 레코드 구성."""

    key: str
    model: type
    option_model: Optional[type] = None

    @property
    def attributes_key(self) -> str:
        return f"{self.key}_attributes"

    @property
    def options_key(self) -> Optional[str]:
        if self.option_model is None:
            return None
        return f"{self.key}_option_strings"

    @property
    def options_attributes_key(self) -> Optional[str]:
        if self.option_model is None:
            return None
        return f"{self.key}_option_strings_attributes"

    @property
    def has_options(self) -> bool:
        return self.option_model is not None


FIELD_VARIANTS: Dict[str, FieldVariant] = {
    "text_field": FieldVariant("text_field", TextField),
    "text_area": FieldVariant("text_area", TextArea),
    "date_field": FieldVariant("date_field", DateField),
    "radio_button": FieldVariant("radio_button", RadioButton, RadioButtonOptionString),
    "check_box": FieldVariant("check_box", CheckBox, CheckBoxOptionString),
    "select": FieldVariant("select", Select, SelectOptionString),
}
