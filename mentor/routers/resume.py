import os
from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from mentor.config import BACKEND_URL, UPLOADS_DIR
from mentor.dependencies import get_current_user
from mentor.models.user import User
from mentor.services import ai
from mentor.services.resume import (
    ALLOWED_EXTENSIONS,
    MAX_RESUME_BYTES,
    analyze_resume,
    extract_text,
    save_resume,
)

router = APIRouter(prefix="/api/resume", tags=["resume"])


@router.post("/analyze")
async def analyze(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
):
    """
    Analyze an uploaded resume.

    Args:
        file: The resume file (PDF, DOC, DOCX or TXT)

    Returns:
        JSON with the AI review and the stored file URL
    """
    filename = file.filename or ""
    extension = os.path.splitext(filename)[1].lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Please upload a PDF, DOC, DOCX or TXT file.",
        )

    contents = await file.read()
    if not contents:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="The uploaded file is empty")
    if len(contents) > MAX_RESUME_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File size must be less than 10MB",
        )

    relative_path = save_resume(UPLOADS_DIR, current_user.id, filename, contents)
    resume_text = extract_text(contents, extension)

    try:
        analysis = await analyze_resume(filename, resume_text)
    except ai.AIServiceError as e:
        raise ai.ai_error_to_http(e)

    return {"analysis": analysis, "file_url": f"{BACKEND_URL}/uploads/{relative_path}"}
