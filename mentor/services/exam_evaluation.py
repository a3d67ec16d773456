"""Exam scoring and AI feedback."""

import json
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from mentor.config import GEMINI_FEEDBACK_MODEL
from mentor.database import SessionLocal
from mentor.models.exam import Exam, ExamResult, Question, UserAnswer
from mentor.services import ai

logger = logging.getLogger(__name__)

IMPROVEMENT_THRESHOLD = 0.7
FEEDBACK_PLACEHOLDER = "Generating detailed feedback..."

FEEDBACK_SYSTEM_PROMPT = (
    "You are an expert technical mentor. Provide concise, actionable feedback covering: "
    "1) Overall assessment 2) Strengths 3) Improvement areas 4) Study recommendations. "
    "Keep it brief and practical."
)


def score_answers(questions: list[Question], answers: dict[str, Optional[str]]) -> dict:
    """Score questions against the user's selections.

    ``answers`` maps question id to the selected option letter.
    Returns counts, per-topic tallies, the percentage score and the
    topics below the improvement threshold.
    """
    correct = 0
    incorrect = 0
    unanswered = 0
    topic_scores: dict[str, dict[str, int]] = {}

    for question in questions:
        topic = question.topic or "General"
        scores = topic_scores.setdefault(topic, {"correct": 0, "total": 0})
        scores["total"] += 1

        selected = answers.get(question.id)
        if not selected:
            unanswered += 1
        elif selected == question.correct_answer:
            correct += 1
            scores["correct"] += 1
        else:
            incorrect += 1

    total_score = round(correct / len(questions) * 100, 2) if questions else 0.0

    improvement_areas = [
        {
            "topic": topic,
            "accuracy": round(scores["correct"] / scores["total"] * 100, 1),
            "questions_count": scores["total"],
        }
        for topic, scores in topic_scores.items()
        if scores["correct"] / scores["total"] < IMPROVEMENT_THRESHOLD
    ]

    return {
        "total_score": total_score,
        "correct_answers": correct,
        "incorrect_answers": incorrect,
        "unanswered": unanswered,
        "topic_wise_scores": topic_scores,
        "improvement_areas": improvement_areas,
    }


def evaluate_exam(db: Session, exam: Exam) -> ExamResult:
    """Score a submitted exam, store the result and mark the exam completed."""
    questions = (
        db.query(Question)
        .filter(Question.exam_id == exam.id)
        .order_by(Question.question_number)
        .all()
    )
    user_answers = (
        db.query(UserAnswer)
        .filter(UserAnswer.exam_id == exam.id, UserAnswer.user_id == exam.user_id)
        .all()
    )
    answers_by_question = {a.question_id: a for a in user_answers}

    scores = score_answers(
        questions,
        {qid: a.selected_answer for qid, a in answers_by_question.items()},
    )

    for question in questions:
        answer = answers_by_question.get(question.id)
        if answer and answer.selected_answer:
            answer.is_correct = answer.selected_answer == question.correct_answer

    result = ExamResult(
        exam_id=exam.id,
        user_id=exam.user_id,
        ai_feedback=FEEDBACK_PLACEHOLDER,
        **scores,
    )
    db.add(result)

    exam.status = "completed"
    exam.completed_at = datetime.utcnow()

    db.commit()
    db.refresh(result)
    logger.info(
        "[Exam] Evaluated exam %s: score=%s correct=%d incorrect=%d unanswered=%d",
        exam.id, result.total_score, result.correct_answers,
        result.incorrect_answers, result.unanswered,
    )
    return result


def build_performance_summary(exam: Exam, result: ExamResult) -> str:
    total = result.correct_answers + result.incorrect_answers + (result.unanswered or 0)
    return (
        f"Technology: {exam.technology}\n"
        f"Experience Level: {exam.experience_level}\n"
        f"Difficulty: {exam.difficulty}\n"
        f"Score: {result.total_score}%\n"
        f"Correct: {result.correct_answers}/{total}\n"
        f"Incorrect: {result.incorrect_answers}\n"
        f"Unanswered: {result.unanswered}\n"
        f"Topic Scores: {json.dumps(result.topic_wise_scores)}"
    )


async def generate_feedback(result_id: str) -> None:
    """Background task: ask the model for feedback and store it on the result.

    Uses its own session because the request session is closed by the time
    background tasks run. Failures leave the placeholder in place.
    """
    db = SessionLocal()
    try:
        result = db.query(ExamResult).filter(ExamResult.id == result_id).first()
        if not result:
            logger.warning("[Exam] Result %s vanished before feedback generation", result_id)
            return
        exam = db.query(Exam).filter(Exam.id == result.exam_id).first()

        try:
            feedback = await ai.generate_text(
                build_performance_summary(exam, result),
                system_instruction=FEEDBACK_SYSTEM_PROMPT,
                model=GEMINI_FEEDBACK_MODEL,
            )
        except ai.AIServiceError as e:
            logger.error("[Exam] Background feedback generation failed: %s", e.message)
            return

        if feedback.strip():
            result.ai_feedback = feedback.strip()
            db.commit()
            logger.info("[Exam] AI feedback generated and saved for result %s", result_id)
    finally:
        db.close()
