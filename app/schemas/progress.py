from pydantic import BaseModel, Field
from typing import List, Optional


class ProgressStats(BaseModel):
    total_lessons: int
    total_completed: int
    percentage: int
    rank: str


class ProgressResponse(BaseModel):
    completed_lesson_ids: List[int]
    stats: ProgressStats
    resume_lesson_id: Optional[int] = None  # None when the tree has no lessons


class RatingRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)


class RatingResponse(BaseModel):
    lesson_id: int
    rating: int  # 0 when unrated
