"""Job role model for the Interview Data client."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from .base import Record


class JobRole(Record):
    """A row of ``job_roles``."""

    id: str = Field(..., description="Job role identifier")
    title: str = Field(..., description="Job role title")
    is_active: bool = Field(..., description="Whether the role is offered to users")
    category: Optional[str] = Field(None, description="Role category")
    description: Optional[str] = Field(None, description="Role description")
    required_skills: List[str] = Field(default_factory=list, description="Skills the role requires")
    experience_levels: Optional[List[str]] = Field(None, description="Experience levels the role covers")
    industry: Optional[str] = Field(None, description="Industry")
    average_salary_range: Optional[str] = Field(None, description="Average salary range")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @field_validator("required_skills", mode="before")
    @classmethod
    def default_required_skills(cls, v):
        return [] if v is None else v
