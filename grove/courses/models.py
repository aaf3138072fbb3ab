from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Dict, Any
from enum import Enum
import math

# ==================== ENUMS ====================

class CourseStatus(str, Enum):
    DRAFT = "Draft"
    REVIEW = "Review"
    ACTIVE = "Active"

class ReviewOutcome(str, Enum):
    """Decisions an admin can take on a course waiting in the review queue"""
    ACTIVE = "Active"
    DRAFT = "Draft"

# ==================== CURRICULUM MODELS ====================

class Section(BaseModel):
    """
    Curriculum section as sent by the course builder.
    Only the lecture list is required; titles, ids and other builder
    fields are kept as-is.
    """
    model_config = ConfigDict(extra="allow")

    lectures: List[Dict[str, Any]]

# ==================== SUBMISSION MODELS ====================

class CourseSubmission(BaseModel):
    """What the quality gate looks at"""
    title: str
    description: str = ""
    curriculum: List[Section]
    thumbnail_url: Optional[str] = Field(None, alias="thumbnailUrl")
    promo_video_url: Optional[str] = Field(None, alias="promoVideoUrl")

    @property
    def lecture_count(self) -> int:
        return sum(len(section.lectures) for section in self.curriculum)

class CoursePublishRequest(CourseSubmission):
    """Body of POST /api/courses"""
    instructor_id: str
    subtitle: str = ""
    category: Optional[str] = None
    level: Optional[str] = None
    price: float = 0
    objectives: List[Any] = []

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, v):
        if v is None or v == "Free":
            return 0
        if isinstance(v, bool):
            raise ValueError("Price must be 'Free' or a number")
        if isinstance(v, str):
            try:
                parsed = float(v.strip())
            except ValueError:
                raise ValueError("Price must be 'Free' or a number")
        else:
            parsed = v
        # Non-finite prices fail before float coercion
        if isinstance(parsed, (int, float)) and not math.isfinite(parsed):
            raise ValueError("Price must be a finite number")
        return parsed

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v < 0:
            raise ValueError("Price cannot be negative")
        return v

    @field_validator("instructor_id")
    @classmethod
    def validate_instructor(cls, v):
        if not v.strip():
            raise ValueError("instructor_id cannot be empty")
        return v

# ==================== REVIEW MODELS ====================

class ReviewDecision(BaseModel):
    decision: ReviewOutcome
