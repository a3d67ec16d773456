from pydantic import BaseModel, Field
from typing import Optional, Any
from datetime import datetime


class GenerateExamRequest(BaseModel):
    technology: str = Field(min_length=1)
    experience_level: str = Field(min_length=1)
    difficulty: str = Field(min_length=1)
    question_count: int = Field(default=20, ge=1, le=50)


class GenerateExamResponse(BaseModel):
    exam_id: str
    question_count: int
    message: str = "Exam generated successfully"


class ExamResponse(BaseModel):
    id: str
    technology: str
    experience_level: str
    difficulty: str
    total_questions: int
    time_limit_minutes: Optional[int]
    status: str
    started_at: Optional[datetime]
    completed_at: Optional[datetime]

    class Config:
        from_attributes = True


class QuestionWithoutAnswer(BaseModel):
    """A question as shown while the exam is being taken."""

    id: str
    question_number: int
    question_text: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    topic: Optional[str]

    class Config:
        from_attributes = True


class QuestionResponse(QuestionWithoutAnswer):
    correct_answer: str
    explanation: Optional[str]


class ExamDetailResponse(BaseModel):
    exam: ExamResponse
    questions: list[QuestionWithoutAnswer]


class AnswerSubmission(BaseModel):
    question_id: str
    selected_answer: Optional[str] = None
    time_spent_seconds: int = 0


class SubmitAnswersRequest(BaseModel):
    answers: list[AnswerSubmission]


class UserAnswerResponse(BaseModel):
    question_id: str
    selected_answer: Optional[str]
    is_correct: Optional[bool]
    time_spent_seconds: Optional[int]

    class Config:
        from_attributes = True


class ExamResultResponse(BaseModel):
    id: str
    exam_id: str
    total_score: float
    correct_answers: int
    incorrect_answers: int
    unanswered: Optional[int]
    topic_wise_scores: Optional[dict[str, dict[str, int]]]
    improvement_areas: Optional[list[dict[str, Any]]]
    ai_feedback: Optional[str]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class EvaluateExamResponse(BaseModel):
    result: ExamResultResponse
    message: str = "Exam evaluated successfully"


class ExamResultsDetailResponse(BaseModel):
    exam: ExamResponse
    result: ExamResultResponse
    questions: list[QuestionResponse]
    answers: list[UserAnswerResponse]


class ExamStatsResponse(BaseModel):
    completed_exams: int
    average_score: float
    best_score: float
    topic_accuracy: dict[str, float]
