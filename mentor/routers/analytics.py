from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from mentor.database import get_db
from mentor.dependencies import get_current_user_optional, require_admin
from mentor.models.user import User
from mentor.schemas.analytics import TrackVisitRequest, TrackVisitResponse, AnalyticsSummaryResponse
from mentor.services.footfall import MENTOR_CATEGORIES, analytics_summary, mentor_category_for_path, track_visit

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.post("/track", response_model=TrackVisitResponse)
async def track(
    request: TrackVisitRequest,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: Session = Depends(get_db),
):
    """Record a page view and heartbeat for a visitor session."""
    if not request.session_id or not request.page:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="session_id and page are required",
        )

    category = request.mentor_category or mentor_category_for_path(request.page)
    if category and category not in MENTOR_CATEGORIES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown mentor category: {category}",
        )

    active = track_visit(
        db,
        session_id=request.session_id,
        page=request.page,
        mentor_category=category,
        user_id=current_user.id if current_user else None,
    )
    return TrackVisitResponse(active_visitors=active)


@router.get("/summary", response_model=AnalyticsSummaryResponse)
async def summary(
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Footfall overview for the admin dashboard."""
    return analytics_summary(db)
