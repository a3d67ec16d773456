from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session
from mentor.database import get_db
from mentor.dependencies import get_current_user
from mentor.models.exam import Exam, ExamResult, Question, UserAnswer
from mentor.models.user import User
from mentor.schemas.exam import (
    GenerateExamRequest,
    GenerateExamResponse,
    ExamResponse,
    ExamDetailResponse,
    SubmitAnswersRequest,
    EvaluateExamResponse,
    ExamResultsDetailResponse,
    ExamStatsResponse,
)
from mentor.services import ai
from mentor.services.exam_generation import ExamGenerationError, create_exam, generate_questions
from mentor.services.exam_evaluation import evaluate_exam, generate_feedback

router = APIRouter(prefix="/api/exams", tags=["exams"])

VALID_SELECTIONS = ("A", "B", "C", "D")


def _get_user_exam(db: Session, exam_id: str, user_id: str) -> Exam:
    exam = db.query(Exam).filter(Exam.id == exam_id, Exam.user_id == user_id).first()
    if not exam:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Exam not found or you do not have access",
        )
    return exam


@router.post("/generate", response_model=GenerateExamResponse)
async def generate_exam(
    request: GenerateExamRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Generate a new AI exam for the current user."""
    try:
        questions = await generate_questions(
            technology=request.technology,
            experience_level=request.experience_level,
            difficulty=request.difficulty,
            question_count=request.question_count,
        )
    except ai.AIServiceError as e:
        raise ai.ai_error_to_http(e)
    except ExamGenerationError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    exam = create_exam(
        db=db,
        user=current_user,
        technology=request.technology,
        experience_level=request.experience_level,
        difficulty=request.difficulty,
        questions=questions,
    )
    return GenerateExamResponse(exam_id=exam.id, question_count=len(questions))


@router.get("", response_model=list[ExamResponse])
async def list_exams(
    limit: int = 50,
    offset: int = 0,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get the current user's exams, newest first."""
    return (
        db.query(Exam)
        .filter(Exam.user_id == current_user.id)
        .order_by(Exam.created_at.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


@router.get("/stats", response_model=ExamStatsResponse)
async def get_exam_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Aggregate the current user's completed exam results."""
    results = db.query(ExamResult).filter(ExamResult.user_id == current_user.id).all()

    topic_totals: dict[str, dict[str, int]] = {}
    for result in results:
        for topic, scores in (result.topic_wise_scores or {}).items():
            totals = topic_totals.setdefault(topic, {"correct": 0, "total": 0})
            totals["correct"] += scores.get("correct", 0)
            totals["total"] += scores.get("total", 0)

    scores = [r.total_score for r in results]
    return ExamStatsResponse(
        completed_exams=len(results),
        average_score=round(sum(scores) / len(scores), 1) if scores else 0.0,
        best_score=max(scores) if scores else 0.0,
        topic_accuracy={
            topic: round(t["correct"] / t["total"] * 100, 1)
            for topic, t in topic_totals.items()
            if t["total"]
        },
    )


@router.get("/{exam_id}", response_model=ExamDetailResponse)
async def get_exam(
    exam_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get an exam with its questions, without answers or explanations."""
    exam = _get_user_exam(db, exam_id, current_user.id)
    if not exam.questions:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No questions found for this exam",
        )
    return ExamDetailResponse(exam=exam, questions=exam.questions)


@router.post("/{exam_id}/answers")
async def submit_answers(
    exam_id: str,
    request: SubmitAnswersRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Save the user's selections. Correctness is only decided on evaluation."""
    exam = _get_user_exam(db, exam_id, current_user.id)
    if exam.status == "completed":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Exam has already been submitted",
        )

    question_ids = {q.id for q in exam.questions}
    unknown = [a.question_id for a in request.answers if a.question_id not in question_ids]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown question ids: {', '.join(unknown)}",
        )

    existing = {
        a.question_id: a
        for a in db.query(UserAnswer).filter(
            UserAnswer.exam_id == exam.id, UserAnswer.user_id == current_user.id
        )
    }

    for submission in request.answers:
        selected = (submission.selected_answer or "").strip().upper() or None
        if selected and selected not in VALID_SELECTIONS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid answer '{submission.selected_answer}'",
            )

        answer = existing.get(submission.question_id)
        if not answer:
            answer = UserAnswer(
                exam_id=exam.id,
                question_id=submission.question_id,
                user_id=current_user.id,
            )
            db.add(answer)
            existing[submission.question_id] = answer
        answer.selected_answer = selected
        answer.is_correct = None
        answer.time_spent_seconds = submission.time_spent_seconds

    db.commit()
    return {"status": "ok", "saved": len(request.answers)}


@router.post("/{exam_id}/evaluate", response_model=EvaluateExamResponse)
async def evaluate(
    exam_id: str,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Score the exam now; detailed AI feedback is filled in afterwards."""
    exam = _get_user_exam(db, exam_id, current_user.id)
    if exam.result:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Exam has already been evaluated",
        )

    result = evaluate_exam(db, exam)
    background_tasks.add_task(generate_feedback, result.id)
    return EvaluateExamResponse(result=result)


@router.get("/{exam_id}/results", response_model=ExamResultsDetailResponse)
async def get_results(
    exam_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get the result, the full questions with explanations and the user's answers."""
    exam = _get_user_exam(db, exam_id, current_user.id)
    if not exam.result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Exam has not been evaluated yet",
        )

    answers = (
        db.query(UserAnswer)
        .filter(UserAnswer.exam_id == exam.id, UserAnswer.user_id == current_user.id)
        .all()
    )
    questions = (
        db.query(Question)
        .filter(Question.exam_id == exam.id)
        .order_by(Question.question_number)
        .all()
    )
    return ExamResultsDetailResponse(
        exam=exam,
        result=exam.result,
        questions=questions,
        answers=answers,
    )
