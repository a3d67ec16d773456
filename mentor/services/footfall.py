"""Visitor tracking and footfall aggregation."""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from mentor.models.analytics import (
    DailyFootfall,
    LifetimeVisitors,
    MentorFootfall,
    PageVisit,
    VisitorSession,
)

logger = logging.getLogger(__name__)

MENTOR_CATEGORIES = ("tech", "finance", "health", "education")
ACTIVE_WINDOW = timedelta(minutes=5)
SESSION_RETENTION = timedelta(hours=24)

_CATEGORY_PATHS = [
    ("tech", ("/mentor/tech", "/interview", "/exam", "/resume", "/coding-playground")),
    ("finance", ("/mentor/finance", "/finance/")),
    ("health", ("/mentor/health", "/health/")),
    ("education", ("/mentor/education", "/education/")),
]


def mentor_category_for_path(pathname: str) -> Optional[str]:
    """Map a front-end path to the mentor category it belongs to."""
    for category, fragments in _CATEGORY_PATHS:
        if any(fragment in pathname for fragment in fragments):
            return category
    return None


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def upsert_visitor_session(
    db: Session,
    session_id: str,
    page: str,
    mentor_category: Optional[str],
    user_id: Optional[str],
    now: datetime,
) -> bool:
    """Insert or refresh a visitor session. Returns True for a new session."""
    session = db.query(VisitorSession).filter(VisitorSession.session_id == session_id).first()
    if session:
        session.page = page
        session.mentor_category = mentor_category
        session.user_id = user_id
        session.last_ping = now
        return False

    db.add(
        VisitorSession(
            session_id=session_id,
            user_id=user_id,
            page=page,
            mentor_category=mentor_category,
            last_ping=now,
        )
    )
    return True


def refresh_daily_footfall(db: Session, day: date) -> DailyFootfall:
    start, end = _day_bounds(day)
    visits = db.query(PageVisit.session_id).filter(
        PageVisit.visited_at >= start, PageVisit.visited_at < end
    )
    total_views = visits.count()
    unique_visitors = visits.distinct().count()

    row = db.query(DailyFootfall).filter(DailyFootfall.date == day).first()
    if not row:
        row = DailyFootfall(date=day)
        db.add(row)
    row.unique_visitors_count = unique_visitors
    row.total_page_views = total_views
    return row


def refresh_mentor_footfall(db: Session, day: date, mentor_category: str) -> MentorFootfall:
    start, end = _day_bounds(day)
    visits = db.query(PageVisit.session_id).filter(
        PageVisit.visited_at >= start,
        PageVisit.visited_at < end,
        PageVisit.page.like(f"%{mentor_category}%"),
    )
    total_visits = visits.count()
    unique_visitors = visits.distinct().count()

    row = (
        db.query(MentorFootfall)
        .filter(MentorFootfall.date == day, MentorFootfall.mentor_category == mentor_category)
        .first()
    )
    if not row:
        row = MentorFootfall(date=day, mentor_category=mentor_category)
        db.add(row)
    row.unique_visitors = unique_visitors
    row.total_visits = total_visits
    return row


def increment_lifetime_visitors(db: Session) -> LifetimeVisitors:
    row = db.query(LifetimeVisitors).first()
    if not row:
        row = LifetimeVisitors(total_unique_visitors=0)
        db.add(row)
    row.total_unique_visitors = (row.total_unique_visitors or 0) + 1
    row.last_updated = datetime.utcnow()
    return row


def cleanup_old_sessions(db: Session, now: datetime) -> int:
    """Delete visitor sessions that have not pinged within the retention window."""
    return (
        db.query(VisitorSession)
        .filter(VisitorSession.last_ping < now - SESSION_RETENTION)
        .delete(synchronize_session=False)
    )


def count_active_visitors(db: Session, now: Optional[datetime] = None) -> int:
    now = now or datetime.utcnow()
    return (
        db.query(func.count(VisitorSession.id))
        .filter(VisitorSession.last_ping >= now - ACTIVE_WINDOW)
        .scalar()
    )


def track_visit(
    db: Session,
    session_id: str,
    page: str,
    mentor_category: Optional[str] = None,
    user_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> int:
    """Record a page visit/heartbeat and refresh the footfall aggregates.

    Returns the number of currently active visitors.
    """
    now = now or datetime.utcnow()
    mentor_category = mentor_category or mentor_category_for_path(page)
    logger.debug(
        "[Footfall] Tracking visitor session=%s page=%s category=%s user=%s",
        session_id, page, mentor_category, user_id,
    )

    is_new_session = upsert_visitor_session(db, session_id, page, mentor_category, user_id, now)
    if is_new_session:
        seen_before = (
            db.query(PageVisit.id).filter(PageVisit.session_id == session_id).first() is not None
        )
        if not seen_before:
            increment_lifetime_visitors(db)

    db.add(PageVisit(page=page, session_id=session_id, user_id=user_id, visited_at=now))
    db.flush()

    today = now.date()
    refresh_daily_footfall(db, today)
    if mentor_category:
        refresh_mentor_footfall(db, today, mentor_category)

    removed = cleanup_old_sessions(db, now)
    if removed:
        logger.info("[Footfall] Removed %d idle visitor sessions", removed)

    db.commit()
    return count_active_visitors(db, now)


def analytics_summary(db: Session, today: Optional[date] = None) -> dict:
    today = today or datetime.utcnow().date()
    daily = db.query(DailyFootfall).order_by(DailyFootfall.date.desc()).limit(7).all()
    mentor = db.query(MentorFootfall).filter(MentorFootfall.date == today).all()
    lifetime = db.query(LifetimeVisitors).first()

    return {
        "active_visitors": count_active_visitors(db),
        "daily_footfall": daily,
        "today": daily[0] if daily and daily[0].date == today else None,
        "mentor_footfall": mentor,
        "lifetime_visitors": lifetime.total_unique_visitors if lifetime else 0,
    }
