from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from mentor.database import get_db
from mentor.dependencies import require_admin
from mentor.models.exam import Exam, ExamResult
from mentor.models.user import User, Profile
from mentor.schemas.analytics import AdminDashboardResponse, TopPerformer

router = APIRouter(prefix="/api/admin", tags=["admin"])

RECENT_EXAMS_LIMIT = 50
TOP_PERFORMERS_LIMIT = 5


@router.get("/dashboard", response_model=AdminDashboardResponse)
async def dashboard(
    _admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Exam statistics over the most recent completed exams."""
    rows = (
        db.query(Exam, ExamResult, Profile)
        .join(ExamResult, ExamResult.exam_id == Exam.id)
        .outerjoin(Profile, Profile.user_id == Exam.user_id)
        .filter(Exam.status == "completed")
        .order_by(Exam.completed_at.desc())
        .limit(RECENT_EXAMS_LIMIT)
        .all()
    )

    exams = []
    per_user: dict[str, list[float]] = {}
    for exam, result, profile in rows:
        per_user.setdefault(exam.user_id, []).append(result.total_score)
        exams.append(
            {
                "id": exam.id,
                "user_id": exam.user_id,
                "user_name": profile.name if profile else None,
                "technology": exam.technology,
                "difficulty": exam.difficulty,
                "total_score": result.total_score,
                "completed_at": exam.completed_at.isoformat() if exam.completed_at else None,
            }
        )

    scores = [e["total_score"] for e in exams]
    performers = sorted(
        (
            TopPerformer(
                user_id=user_id,
                avg_score=round(sum(user_scores) / len(user_scores), 1),
                exams_count=len(user_scores),
            )
            for user_id, user_scores in per_user.items()
        ),
        key=lambda p: p.avg_score,
        reverse=True,
    )

    return AdminDashboardResponse(
        total_users=len(per_user),
        total_exams=len(exams),
        avg_score=round(sum(scores) / len(scores)) if scores else 0,
        top_performers=performers[:TOP_PERFORMERS_LIMIT],
        exams=exams,
    )
