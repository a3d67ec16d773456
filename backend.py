from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
import os
import logging
from mentor.config import FRONTEND_URL, LOG_LEVEL, UPLOADS_DIR, GEMINI_API_KEY

from mentor.logging import setup_logging
from mentor.database import init_db
from mentor.routers import (
    auth_router,
    users_router,
    exams_router,
    analytics_router,
    admin_router,
    finance_router,
    playground_router,
    resume_router,
)

setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Mentor Platform API")

os.makedirs(UPLOADS_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=UPLOADS_DIR), name="uploads")

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(exams_router)
app.include_router(analytics_router)
app.include_router(admin_router)
app.include_router(finance_router)
app.include_router(playground_router)
app.include_router(resume_router)


def _strip_trailing_slash(value: str) -> str:
    return value[:-1] if value.endswith("/") else value


allowed_origins = [
    _strip_trailing_slash(FRONTEND_URL),
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
]

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

init_db()

if not GEMINI_API_KEY:
    logger.warning("[Gemini] GEMINI_API_KEY not set; AI endpoints will return errors")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "Mentor Platform API is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
