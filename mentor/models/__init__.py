from mentor.models.user import User, Profile, UserRole
from mentor.models.exam import Exam, Question, UserAnswer, ExamResult
from mentor.models.analytics import (
    VisitorSession,
    PageVisit,
    DailyFootfall,
    MentorFootfall,
    LifetimeVisitors,
)
from mentor.models.finance import FinancialProfile, Budget, Expense, FinancialGoal, Investment
from mentor.models.playground import CodeSnippet

__all__ = [
    "User",
    "Profile",
    "UserRole",
    "Exam",
    "Question",
    "UserAnswer",
    "ExamResult",
    "VisitorSession",
    "PageVisit",
    "DailyFootfall",
    "MentorFootfall",
    "LifetimeVisitors",
    "FinancialProfile",
    "Budget",
    "Expense",
    "FinancialGoal",
    "Investment",
    "CodeSnippet",
]
