from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from mentor.database import get_db
from mentor.dependencies import get_current_user
from mentor.models.finance import Budget, Expense, FinancialGoal, FinancialProfile, Investment
from mentor.models.user import User
from mentor.schemas.finance import (
    FinancialProfileUpdate,
    FinancialProfileResponse,
    ExpenseCreate,
    ExpenseResponse,
    BudgetSummaryResponse,
    BudgetUpsert,
    BudgetResponse,
    GoalCreate,
    GoalProgressRequest,
    GoalResponse,
    InvestmentCreate,
    InvestmentResponse,
    HealthScoreResponse,
    AdvisorRequest,
)
from mentor.services import ai
from mentor.services import finance as finance_service

router = APIRouter(prefix="/api/finance", tags=["finance"])

EXPENSES_LIMIT = 50
HEALTH_GOALS_LIMIT = 3
ADVISOR_TYPES = ("investment", "budget")


def _get_profile(db: Session, user_id: str):
    return db.query(FinancialProfile).filter(FinancialProfile.user_id == user_id).first()


def _get_owned(db: Session, model, item_id: str, user_id: str, label: str):
    item = db.query(model).filter(model.id == item_id, model.user_id == user_id).first()
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return item


# ============== Profile ==============

@router.get("/profile", response_model=FinancialProfileResponse)
async def get_financial_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    profile = _get_profile(db, current_user.id)
    if not profile:
        profile = FinancialProfile(user_id=current_user.id)
        db.add(profile)
        db.commit()
        db.refresh(profile)
    return profile


@router.put("/profile", response_model=FinancialProfileResponse)
async def update_financial_profile(
    update_data: FinancialProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    profile = _get_profile(db, current_user.id)
    if not profile:
        profile = FinancialProfile(user_id=current_user.id)
        db.add(profile)

    for field, value in update_data.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)

    db.commit()
    db.refresh(profile)
    return profile


# ============== Expenses ==============

@router.get("/expenses", response_model=list[ExpenseResponse])
async def list_expenses(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return (
        db.query(Expense)
        .filter(Expense.user_id == current_user.id)
        .order_by(Expense.date.desc(), Expense.created_at.desc())
        .limit(EXPENSES_LIMIT)
        .all()
    )


@router.post("/expenses", response_model=ExpenseResponse)
async def add_expense(
    expense_data: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if expense_data.budget_id:
        _get_owned(db, Budget, expense_data.budget_id, current_user.id, "Budget")

    expense = Expense(
        user_id=current_user.id,
        budget_id=expense_data.budget_id,
        amount=expense_data.amount,
        category=expense_data.category.strip(),
        description=expense_data.description,
        date=expense_data.date or date.today(),
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


@router.delete("/expenses/{expense_id}")
async def delete_expense(
    expense_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    expense = _get_owned(db, Expense, expense_id, current_user.id, "Expense")
    db.delete(expense)
    db.commit()
    return {"status": "deleted"}


@router.get("/budget-summary", response_model=BudgetSummaryResponse)
async def budget_summary(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Income from the financial profile against the recent expenses."""
    profile = _get_profile(db, current_user.id)
    expenses = (
        db.query(Expense)
        .filter(Expense.user_id == current_user.id)
        .order_by(Expense.date.desc(), Expense.created_at.desc())
        .limit(EXPENSES_LIMIT)
        .all()
    )
    income = profile.monthly_income if profile and profile.monthly_income else 0.0
    return finance_service.summarize_budget(income, expenses)


# ============== Budgets ==============

@router.put("/budgets/{year}/{month}", response_model=BudgetResponse)
async def upsert_budget(
    year: int,
    month: int,
    budget_data: BudgetUpsert,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not 1 <= month <= 12:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Month must be between 1 and 12")

    budget = (
        db.query(Budget)
        .filter(Budget.user_id == current_user.id, Budget.year == year, Budget.month == month)
        .first()
    )
    if not budget:
        budget = Budget(user_id=current_user.id, year=year, month=month)
        db.add(budget)

    for field, value in budget_data.model_dump(exclude_unset=True).items():
        setattr(budget, field, value)

    if budget_data.savings is None and budget.total_income is not None:
        budget.savings = budget.total_income - (budget.total_expenses or 0.0)

    db.commit()
    db.refresh(budget)
    return budget


@router.get("/budgets/current", response_model=BudgetResponse)
async def get_current_budget(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    today = date.today()
    budget = (
        db.query(Budget)
        .filter(Budget.user_id == current_user.id, Budget.year == today.year, Budget.month == today.month)
        .first()
    )
    if not budget:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No budget for the current month")
    return budget


# ============== Goals ==============

@router.get("/goals", response_model=list[GoalResponse])
async def list_goals(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return (
        db.query(FinancialGoal)
        .filter(FinancialGoal.user_id == current_user.id)
        .order_by(FinancialGoal.created_at.desc())
        .all()
    )


@router.post("/goals", response_model=GoalResponse)
async def create_goal(
    goal_data: GoalCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    goal = FinancialGoal(
        user_id=current_user.id,
        goal_type=goal_data.goal_type,
        target_amount=goal_data.target_amount,
        current_amount=0.0,
        deadline=goal_data.deadline,
        monthly_contribution=goal_data.monthly_contribution,
        status="active",
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)
    return goal


@router.post("/goals/{goal_id}/progress", response_model=GoalResponse)
async def add_goal_progress(
    goal_id: str,
    progress: GoalProgressRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    goal = _get_owned(db, FinancialGoal, goal_id, current_user.id, "Goal")
    finance_service.apply_goal_progress(goal, progress.amount)
    db.commit()
    db.refresh(goal)
    return goal


@router.delete("/goals/{goal_id}")
async def delete_goal(
    goal_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    goal = _get_owned(db, FinancialGoal, goal_id, current_user.id, "Goal")
    db.delete(goal)
    db.commit()
    return {"status": "deleted"}


# ============== Investments ==============

@router.get("/investments", response_model=list[InvestmentResponse])
async def list_investments(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return (
        db.query(Investment)
        .filter(Investment.user_id == current_user.id)
        .order_by(Investment.created_at.desc())
        .all()
    )


@router.post("/investments", response_model=InvestmentResponse)
async def create_investment(
    investment_data: InvestmentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    investment = Investment(user_id=current_user.id, **investment_data.model_dump())
    db.add(investment)
    db.commit()
    db.refresh(investment)
    return investment


@router.delete("/investments/{investment_id}")
async def delete_investment(
    investment_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    investment = _get_owned(db, Investment, investment_id, current_user.id, "Investment")
    db.delete(investment)
    db.commit()
    return {"status": "deleted"}


# ============== Health & advisor ==============

@router.get("/health", response_model=HealthScoreResponse)
async def financial_health(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    today = date.today()
    budget = (
        db.query(Budget)
        .filter(Budget.user_id == current_user.id, Budget.year == today.year, Budget.month == today.month)
        .first()
    )
    goals = (
        db.query(FinancialGoal)
        .filter(FinancialGoal.user_id == current_user.id, FinancialGoal.status == "active")
        .order_by(FinancialGoal.created_at.desc())
        .limit(HEALTH_GOALS_LIMIT)
        .all()
    )
    score = finance_service.calculate_health_score(_get_profile(db, current_user.id), budget, goals)
    return HealthScoreResponse(score=score, status=finance_service.health_status(score))


@router.post("/advisor")
async def financial_advisor(
    request: AdvisorRequest,
    current_user: User = Depends(get_current_user),
):
    """AI investment or budget advice."""
    if request.type not in ADVISOR_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid request type")

    try:
        if request.type == "investment":
            if request.amount is None or request.period is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="amount and period are required for investment advice",
                )
            return await finance_service.get_investment_advice(
                request.amount, request.period, request.risk_profile or "moderate"
            )

        if request.income is None or request.expenses is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="income and expenses are required for budget advice",
            )
        return await finance_service.get_budget_advice(request.income, request.expenses)
    except ai.AIServiceError as e:
        raise ai.ai_error_to_http(e)
