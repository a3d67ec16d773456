from sqlalchemy import Column, Integer, String, DateTime, Date, UniqueConstraint
from datetime import datetime
from mentor.database import Base, generate_uuid


class VisitorSession(Base):
    __tablename__ = "visitor_sessions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    session_id = Column(String(100), unique=True, index=True, nullable=False)
    user_id = Column(String(36), nullable=True)
    page = Column(String(500), nullable=False)
    mentor_category = Column(String(20), nullable=True)
    last_ping = Column(DateTime, default=datetime.utcnow, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class PageVisit(Base):
    __tablename__ = "page_visits"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    page = Column(String(500), nullable=False)
    session_id = Column(String(100), nullable=False, index=True)
    user_id = Column(String(36), nullable=True)
    visited_at = Column(DateTime, default=datetime.utcnow, index=True)


class DailyFootfall(Base):
    __tablename__ = "daily_footfall"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    date = Column(Date, unique=True, nullable=False)
    unique_visitors_count = Column(Integer, default=0, nullable=False)
    total_page_views = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class MentorFootfall(Base):
    __tablename__ = "mentor_footfall"
    __table_args__ = (UniqueConstraint("date", "mentor_category", name="uq_mentor_footfall_day"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    date = Column(Date, nullable=False)
    mentor_category = Column(String(20), nullable=False)
    unique_visitors = Column(Integer, default=0, nullable=False)
    total_visits = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class LifetimeVisitors(Base):
    __tablename__ = "lifetime_visitors"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    total_unique_visitors = Column(Integer, default=0, nullable=False)
    last_updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
