"""
Profile Schemas
Nested items are stored as JSON on the profile row
"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from app.schemas.common import CamelModel


# ==================== Nested Object Schemas ====================

class ExperienceItem(CamelModel):
    """Work experience entry"""
    company: str = Field(..., min_length=1, max_length=200)
    role: str = Field(..., min_length=1, max_length=200)
    description: str
    type: str = Field(..., max_length=50, description="e.g. 'Internship', 'Full-Time'")
    duration: str = Field(..., max_length=100, description="e.g. '6 months'")


class EducationItem(CamelModel):
    institution: str = Field(..., min_length=1, max_length=200)
    degree: str = Field(..., max_length=100)
    field_of_study: str = Field(..., max_length=100)
    grade: str = Field(..., max_length=20)
    start_date: date
    end_date: date


class ProjectItem(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str
    technologies: List[str]
    live_demo: str = Field(..., max_length=500)
    source_code: str = Field(..., max_length=500)


class AchievementItem(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str
    category: str = Field(..., max_length=100)


# ==================== Profile Schemas ====================

class ProfileUpdate(CamelModel):
    """
    Profile Update Schema
    All fields are optional for partial updates
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    image: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    experience: Optional[List[ExperienceItem]] = None
    education: Optional[List[EducationItem]] = None
    projects: Optional[List[ProjectItem]] = None
    achievements: Optional[List[AchievementItem]] = None


class ProfileResponse(CamelModel):
    id: UUID
    user_id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    image: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    skills: List[str] = []
    experience: List[ExperienceItem] = []
    education: List[EducationItem] = []
    projects: List[ProjectItem] = []
    achievements: List[AchievementItem] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
