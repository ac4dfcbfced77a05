from __future__ import annotations
from pydantic import BaseModel, Field, field_validator

from models import TeacherType

class AddTeacherIn(BaseModel):
    ssn: str = Field(min_length=1, max_length=20)
    type: TeacherType

    @field_validator("ssn")
    @classmethod
    def _strip(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("ssn_required")
        return v
