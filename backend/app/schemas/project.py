"""Project 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ProjectCreate(BaseModel):
    project_name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None


class ProjectOut(ProjectCreate):
    project_id: int
    leader_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
