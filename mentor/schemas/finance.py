from pydantic import BaseModel, Field
from typing import Optional, Any
import datetime as dt


class FinancialProfileUpdate(BaseModel):
    age: Optional[int] = Field(default=None, ge=0)
    monthly_income: Optional[float] = Field(default=None, ge=0)
    risk_profile: Optional[str] = None
    financial_goals: Optional[Any] = None


class FinancialProfileResponse(BaseModel):
    id: str
    age: Optional[int]
    monthly_income: Optional[float]
    risk_profile: Optional[str]
    financial_goals: Optional[Any]
    updated_at: Optional[dt.datetime]

    class Config:
        from_attributes = True


class ExpenseCreate(BaseModel):
    amount: float = Field(gt=0)
    category: str = Field(min_length=1)
    description: Optional[str] = None
    date: Optional[dt.date] = None
    budget_id: Optional[str] = None


class ExpenseResponse(BaseModel):
    id: str
    amount: float = Field(gt=0)
    category: str
    description: Optional[str]
    date: dt.date
    budget_id: Optional[str]

    class Config:
        from_attributes = True


class BudgetSummaryResponse(BaseModel):
    monthly_income: float
    total_expenses: float
    category_totals: dict[str, float]
    savings: float
    savings_rate: float


class BudgetUpsert(BaseModel):
    total_income: Optional[float] = Field(default=None, ge=0)
    total_expenses: Optional[float] = Field(default=None, ge=0)
    savings: Optional[float] = None
    categories: Optional[dict[str, float]] = None


class BudgetResponse(BaseModel):
    id: str
    month: int
    year: int
    total_income: Optional[float]
    total_expenses: Optional[float]
    savings: Optional[float]
    categories: Optional[dict[str, float]]

    class Config:
        from_attributes = True


class GoalCreate(BaseModel):
    goal_type: str = "Emergency Fund"
    target_amount: float = Field(gt=0)
    deadline: Optional[dt.date] = None
    monthly_contribution: Optional[float] = Field(default=None, ge=0)


class GoalProgressRequest(BaseModel):
    amount: float = Field(gt=0)


class GoalResponse(BaseModel):
    id: str
    goal_type: str
    target_amount: float
    current_amount: Optional[float]
    deadline: Optional[dt.date]
    monthly_contribution: Optional[float]
    status: Optional[str]
    created_at: Optional[dt.datetime]

    class Config:
        from_attributes = True


class InvestmentCreate(BaseModel):
    investment_type: str = Field(min_length=1)
    amount: float = Field(gt=0)
    expected_return: Optional[float] = None
    risk_level: Optional[str] = None
    start_date: Optional[dt.date] = None
    notes: Optional[str] = None


class InvestmentResponse(BaseModel):
    id: str
    investment_type: str
    amount: float = Field(gt=0)
    expected_return: Optional[float]
    risk_level: Optional[str]
    start_date: Optional[dt.date]
    notes: Optional[str]

    class Config:
        from_attributes = True


class HealthScoreResponse(BaseModel):
    score: int
    status: str


class AdvisorRequest(BaseModel):
    type: str
    amount: Optional[float] = Field(default=None, gt=0)
    period: Optional[int] = Field(default=None, gt=0)
    risk_profile: Optional[str] = "moderate"
    income: Optional[float] = Field(default=None, ge=0)
    expenses: Optional[float] = Field(default=None, ge=0)
