"""Seed the database with demo data."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from werkzeug.security import generate_password_hash

from app.database import SessionLocal, engine, Base
import app.models  # noqa: F401

from app.models.user import User
from app.models.project import Project
from app.models.question import (
    CheckBox,
    CheckBoxOptionString,
    DateField,
    Question,
    RadioButton,
    RadioButtonOptionString,
    TextArea,
    TextField,
)


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        # Users (password: password)
        password_hash = generate_password_hash("password")
        users = [
            User(name="리더 김철수", email="leader@example.com", encrypted_password=password_hash),
            User(name="멤버 이영희", email="member@example.com", encrypted_password=password_hash),
        ]
        db.add_all(users)
        db.flush()

        project = Project(
            project_name="주간 업무 보고",
            description="매주 금요일 제출하는 업무 보고서",
            leader_id=users[0].user_id,
        )
        db.add(project)
        db.flush()

        # Report format
        questions = [
            Question(project_id=project.project_id, position=1, form_table_type="date_field",
                     date_field=DateField(label_name="보고일", field_type="required")),
            Question(project_id=project.project_id, position=2, form_table_type="text_field",
                     text_field=TextField(label_name="이번 주 목표", field_type="required")),
            Question(project_id=project.project_id, position=3, form_table_type="text_area",
                     text_area=TextArea(label_name="진행 내용", field_type="optional")),
            Question(
                project_id=project.project_id, position=4, form_table_type="radio_button",
                radio_button=RadioButton(
                    label_name="진척 상태",
                    field_type="required",
                    radio_button_option_strings=[
                        RadioButtonOptionString(option_string="순조"),
                        RadioButtonOptionString(option_string="지연"),
                    ],
                ),
            ),
            Question(
                project_id=project.project_id, position=5, form_table_type="check_box",
                check_box=CheckBox(
                    label_name="지원 필요 항목",
                    field_type="optional",
                    check_box_option_strings=[
                        CheckBoxOptionString(option_string="인력"),
                        CheckBoxOptionString(option_string="예산"),
                        CheckBoxOptionString(option_string="일정"),
                    ],
                ),
            ),
        ]
        db.add_all(questions)
        db.commit()
        print("Database seeded successfully.")
        print("  Leader: leader@example.com / password")
        print("  Member: member@example.com / password")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
