from sqlalchemy import Column, Integer, String, DateTime, Date, Text, ForeignKey, Float, JSON, UniqueConstraint
from datetime import datetime, date
from mentor.database import Base, generate_uuid


class FinancialProfile(Base):
    __tablename__ = "user_financial_profiles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)

    age = Column(Integer, nullable=True)
    monthly_income = Column(Float, nullable=True)
    risk_profile = Column(String(20), nullable=True)  # low, moderate, high
    financial_goals = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Budget(Base):
    __tablename__ = "budgets"
    __table_args__ = (UniqueConstraint("user_id", "month", "year", name="uq_budget_month"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)

    total_income = Column(Float, nullable=True)
    total_expenses = Column(Float, nullable=True)
    savings = Column(Float, nullable=True)
    categories = Column(JSON, nullable=True)  # {category: amount}

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    budget_id = Column(String(36), ForeignKey("budgets.id"), nullable=True)

    amount = Column(Float, nullable=False)
    category = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, default=date.today, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)


class FinancialGoal(Base):
    __tablename__ = "financial_goals"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    goal_type = Column(String(100), nullable=False)
    target_amount = Column(Float, nullable=False)
    current_amount = Column(Float, default=0.0)
    deadline = Column(Date, nullable=True)
    monthly_contribution = Column(Float, nullable=True)
    status = Column(String(20), default="active")  # active, completed

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Investment(Base):
    __tablename__ = "investments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    investment_type = Column(String(100), nullable=False)
    amount = Column(Float, nullable=False)
    expected_return = Column(Float, nullable=True)
    risk_level = Column(String(20), nullable=True)
    start_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
