"""Exam generation: prompt the model for MCQs and persist the exam."""

import json
import logging
import re
from typing import Any
from sqlalchemy.orm import Session
from mentor.models.exam import Exam, Question
from mentor.models.user import User
from mentor.services import ai

logger = logging.getLogger(__name__)

VALID_ANSWERS = ("A", "B", "C", "D")
QUESTION_FIELDS = (
    "question_text",
    "option_a",
    "option_b",
    "option_c",
    "option_d",
    "correct_answer",
)

QUESTIONS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "questions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "question_number": {"type": "INTEGER"},
                    "question_text": {"type": "STRING"},
                    "option_a": {"type": "STRING"},
                    "option_b": {"type": "STRING"},
                    "option_c": {"type": "STRING"},
                    "option_d": {"type": "STRING"},
                    "correct_answer": {"type": "STRING", "enum": ["A", "B", "C", "D"]},
                    "explanation": {"type": "STRING"},
                    "topic": {"type": "STRING"},
                },
                "required": [
                    "question_number",
                    "question_text",
                    "option_a",
                    "option_b",
                    "option_c",
                    "option_d",
                    "correct_answer",
                    "explanation",
                    "topic",
                ],
            },
        }
    },
    "required": ["questions"],
}


class ExamGenerationError(Exception):
    """The model returned something that could not be turned into questions."""


def build_exam_prompts(technology: str, experience_level: str, difficulty: str, question_count: int) -> tuple[str, str]:
    system_prompt = f"""You are an expert technical exam creator specializing in {technology}.
Generate {question_count} multiple-choice questions for a {experience_level} level candidate.
Difficulty: {difficulty}

Follow these rules:
- Questions should match {difficulty} difficulty (like Microsoft/SAP certification exams)
- Each question must have exactly 4 options (A, B, C, D)
- Only ONE correct answer per question
- Include detailed explanations for the correct answer
- Cover diverse topics within {technology}
- Questions should test practical knowledge, not just theory

Return ONLY valid JSON with this exact structure:
{{"questions": [
  {{
    "question_number": 1,
    "question_text": "Question here?",
    "option_a": "Option A text",
    "option_b": "Option B text",
    "option_c": "Option C text",
    "option_d": "Option D text",
    "correct_answer": "A",
    "explanation": "Detailed explanation why this is correct",
    "topic": "Specific topic area"
  }}
]}}"""
    user_prompt = f"Generate {question_count} exam questions for {technology} at {experience_level} level."
    return system_prompt, user_prompt


def sanitize_model_json(text: str) -> str:
    """Clean up common model formatting mistakes before json.loads."""
    s = (text or "").strip()
    s = re.sub(r"```json|```", "", s)
    s = re.sub("[‘’“”]", '"', s)
    s = re.sub(r",\s*([}\]])", r"\1", s)

    # Keep the largest array when the model wraps it in prose
    match = re.search(r"\[\s*{[\s\S]*}\s*\]", s)
    if match:
        s = match.group(0)
    return s.strip()


def parse_questions(text: str) -> list[Any]:
    """Turn model output into a list of raw question payloads."""
    stripped = re.sub(r"```json|```", "", text or "").strip()
    try:
        parsed = json.loads(stripped)
    except json.JSONDecodeError:
        cleaned = sanitize_model_json(stripped)
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError:
            logger.error("[Exam] Failed to parse AI JSON after sanitization: %s", cleaned[:500])
            raise ExamGenerationError("AI returned invalid JSON for questions")

    if isinstance(parsed, dict):
        parsed = parsed.get("questions")

    if not isinstance(parsed, list):
        raise ExamGenerationError("AI did not return an array of questions")
    return parsed


def normalize_questions(raw_questions: list[Any]) -> list[dict]:
    """Validate payloads, upper-case answers and renumber sequentially."""
    questions: list[dict] = []
    for raw in raw_questions:
        if not isinstance(raw, dict):
            continue
        if any(not str(raw.get(field) or "").strip() for field in QUESTION_FIELDS):
            continue
        answer = str(raw["correct_answer"]).strip().upper()
        if answer not in VALID_ANSWERS:
            continue
        questions.append(
            {
                "question_number": len(questions) + 1,
                "question_text": str(raw["question_text"]).strip(),
                "option_a": str(raw["option_a"]).strip(),
                "option_b": str(raw["option_b"]).strip(),
                "option_c": str(raw["option_c"]).strip(),
                "option_d": str(raw["option_d"]).strip(),
                "correct_answer": answer,
                "explanation": str(raw.get("explanation") or "").strip() or None,
                "topic": str(raw.get("topic") or "").strip() or None,
            }
        )
    if not questions:
        raise ExamGenerationError("AI did not return any valid questions")
    return questions


async def generate_questions(
    technology: str, experience_level: str, difficulty: str, question_count: int
) -> list[dict]:
    system_prompt, user_prompt = build_exam_prompts(technology, experience_level, difficulty, question_count)
    text = await ai.generate_text(
        user_prompt,
        system_instruction=system_prompt,
        response_schema=QUESTIONS_SCHEMA,
    )
    return normalize_questions(parse_questions(text))


def create_exam(
    db: Session,
    user: User,
    technology: str,
    experience_level: str,
    difficulty: str,
    questions: list[dict],
) -> Exam:
    """Persist an in-progress exam and its questions."""
    exam = Exam(
        user_id=user.id,
        technology=technology,
        experience_level=experience_level,
        difficulty=difficulty,
        total_questions=len(questions),
        status="in_progress",
    )
    db.add(exam)
    db.flush()

    for q in questions:
        db.add(Question(exam_id=exam.id, **q))

    db.commit()
    db.refresh(exam)
    logger.info("[Exam] Created exam %s with %d questions", exam.id, len(questions))
    return exam
