from pydantic import BaseModel
from typing import Optional, Any
from datetime import date


class TrackVisitRequest(BaseModel):
    session_id: Optional[str] = None
    page: Optional[str] = None
    mentor_category: Optional[str] = None


class TrackVisitResponse(BaseModel):
    success: bool = True
    active_visitors: int


class DailyFootfallResponse(BaseModel):
    date: date
    unique_visitors_count: int
    total_page_views: int

    class Config:
        from_attributes = True


class MentorFootfallResponse(BaseModel):
    date: date
    mentor_category: str
    unique_visitors: int
    total_visits: int

    class Config:
        from_attributes = True


class AnalyticsSummaryResponse(BaseModel):
    active_visitors: int
    daily_footfall: list[DailyFootfallResponse]
    today: Optional[DailyFootfallResponse]
    mentor_footfall: list[MentorFootfallResponse]
    lifetime_visitors: int


class TopPerformer(BaseModel):
    user_id: str
    avg_score: float
    exams_count: int


class AdminDashboardResponse(BaseModel):
    total_users: int
    total_exams: int
    avg_score: int
    top_performers: list[TopPerformer]
    exams: list[dict[str, Any]]
