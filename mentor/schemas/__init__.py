from mentor.schemas.user import (
    UserCreate,
    AdminSetupRequest,
    TokenResponse,
    RefreshTokenRequest,
    PasswordUpdateRequest,
    UserResponse,
    ProfileResponse,
    ProfileUpdateRequest,
)
from mentor.schemas.exam import (
    GenerateExamRequest,
    GenerateExamResponse,
    ExamResponse,
    ExamDetailResponse,
    SubmitAnswersRequest,
    ExamResultResponse,
    EvaluateExamResponse,
    ExamResultsDetailResponse,
    ExamStatsResponse,
)

__all__ = [
    "UserCreate",
    "AdminSetupRequest",
    "TokenResponse",
    "RefreshTokenRequest",
    "PasswordUpdateRequest",
    "UserResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "GenerateExamRequest",
    "GenerateExamResponse",
    "ExamResponse",
    "ExamDetailResponse",
    "SubmitAnswersRequest",
    "ExamResultResponse",
    "EvaluateExamResponse",
    "ExamResultsDetailResponse",
    "ExamStatsResponse",
]
