"""Personal finance calculations and the AI financial advisor."""

import logging
from typing import Iterable, Optional
from mentor.models.finance import Budget, Expense, FinancialGoal, FinancialProfile
from mentor.services import ai

logger = logging.getLogger(__name__)


def summarize_budget(income: float, expenses: Iterable[Expense]) -> dict:
    """Totals per category, savings and savings rate for a list of expenses."""
    category_totals: dict[str, float] = {}
    total_expenses = 0.0
    for expense in expenses:
        category_totals[expense.category] = category_totals.get(expense.category, 0.0) + expense.amount
        total_expenses += expense.amount

    savings = income - total_expenses
    savings_rate = round(savings / income * 100, 1) if income > 0 else 0.0
    return {
        "monthly_income": income,
        "total_expenses": total_expenses,
        "category_totals": category_totals,
        "savings": savings,
        "savings_rate": savings_rate,
    }


def apply_goal_progress(goal: FinancialGoal, amount: float) -> FinancialGoal:
    goal.current_amount = (goal.current_amount or 0.0) + amount
    goal.status = "completed" if goal.current_amount >= goal.target_amount else "active"
    return goal


def calculate_health_score(
    profile: Optional[FinancialProfile],
    budget: Optional[Budget],
    goals: list[FinancialGoal],
) -> int:
    score = 0

    # Savings ratio (40 points)
    if budget and budget.savings and budget.total_income:
        savings_ratio = budget.savings / budget.total_income * 100
        if savings_ratio >= 30:
            score += 40
        elif savings_ratio >= 20:
            score += 30
        elif savings_ratio >= 10:
            score += 20
        else:
            score += 10

    # Goal progress (30 points)
    if goals:
        score += 20
        avg_progress = sum(
            (g.current_amount or 0.0) / g.target_amount * 100 for g in goals
        ) / len(goals)
        if avg_progress >= 50:
            score += 10

    # Income stability (30 points)
    if profile and profile.monthly_income and profile.monthly_income > 0:
        score += 30

    return min(score, 100)


def health_status(score: int) -> str:
    if score >= 80:
        return "Excellent!"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Needs Improvement"
    return "Critical"


INVESTMENT_SYSTEM_PROMPT = (
    "You are an expert financial advisor specializing in investment planning. "
    "Provide clear, actionable advice in simple language."
)
BUDGET_SYSTEM_PROMPT = (
    "You are a personal finance expert helping users optimize their budgets. "
    "Be encouraging and practical."
)


def build_investment_prompt(amount: float, period: int, risk_profile: str) -> str:
    return f"""Create an investment recommendation for:
- Investment Amount: ₹{amount}
- Investment Period: {period} years
- Risk Profile: {risk_profile}

Provide:
1. Expected annual return percentage
2. Projected value after {period} years
3. Detailed portfolio allocation (JSON array with type, allocation%, description)
4. Investment advice in 2-3 sentences

Format response as JSON:
{{
  "expectedReturn": "10-12%",
  "projectedValue": 150000,
  "portfolio": [
    {{"type": "Equity Mutual Funds", "allocation": 40, "description": "Growth-oriented equity funds"}},
    {{"type": "Fixed Deposits", "allocation": 30, "description": "Stable returns with capital protection"}},
    {{"type": "Gold/Bonds", "allocation": 30, "description": "Hedge against inflation"}}
  ],
  "advice": "Your personalized advice here"
}}"""


def build_budget_prompt(income: float, expenses: float) -> str:
    return f"""Analyze this financial situation:
- Monthly Income: ₹{income}
- Monthly Expenses: ₹{expenses}
- Savings: ₹{income - expenses}

Provide:
1. Budget health assessment
2. Savings recommendations
3. Expense optimization tips
4. Emergency fund guidance

Keep response under 200 words, friendly tone."""


async def get_investment_advice(amount: float, period: int, risk_profile: str) -> dict:
    text = await ai.generate_text(
        build_investment_prompt(amount, period, risk_profile),
        system_instruction=INVESTMENT_SYSTEM_PROMPT,
        json_output=True,
        temperature=0.7,
    )
    try:
        return ai.parse_json_object(text)
    except ValueError:
        logger.warning("[Advisor] Investment advice was not JSON, returning text")
        return {"advice": text}


async def get_budget_advice(income: float, expenses: float) -> dict:
    text = await ai.generate_text(
        build_budget_prompt(income, expenses),
        system_instruction=BUDGET_SYSTEM_PROMPT,
        temperature=0.7,
    )
    return {"advice": text.strip()}
