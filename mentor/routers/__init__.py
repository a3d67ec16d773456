from mentor.routers.auth import router as auth_router
from mentor.routers.users import router as users_router
from mentor.routers.exams import router as exams_router
from mentor.routers.analytics import router as analytics_router
from mentor.routers.admin import router as admin_router
from mentor.routers.finance import router as finance_router
from mentor.routers.playground import router as playground_router
from mentor.routers.resume import router as resume_router

__all__ = [
    "auth_router",
    "users_router",
    "exams_router",
    "analytics_router",
    "admin_router",
    "finance_router",
    "playground_router",
    "resume_router",
]
