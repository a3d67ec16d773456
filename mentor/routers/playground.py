import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from mentor.database import get_db
from mentor.dependencies import get_current_user
from mentor.models.playground import CodeSnippet
from mentor.models.user import User
from mentor.schemas.playground import (
    ExecuteCodeRequest,
    ExecuteCodeResponse,
    AssistRequest,
    SnippetCreate,
    SnippetUpdate,
    SnippetResponse,
)
from mentor.services import ai
from mentor.services.code_assistant import ASSISTANT_ACTIONS, assist
from mentor.services.code_runner import CodeExecutionError, execute_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/playground", tags=["playground"])


@router.post("/execute", response_model=ExecuteCodeResponse)
async def execute(
    request: ExecuteCodeRequest,
    current_user: User = Depends(get_current_user),
):
    """Run code in the sandboxed execution service."""
    try:
        return await execute_code(request.language, request.code, request.stdin)
    except CodeExecutionError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/assist")
async def code_assist(
    request: AssistRequest,
    current_user: User = Depends(get_current_user),
):
    """Ask the AI to fix, explain or score a piece of code."""
    if request.action not in ASSISTANT_ACTIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported action: {request.action}",
        )

    try:
        return await assist(
            request.action,
            request.code,
            request.language,
            error=request.error,
            output=request.output,
        )
    except ai.AIServiceError as e:
        raise ai.ai_error_to_http(e)


# ============== Snippets ==============

def _get_snippet(db: Session, snippet_id: str, user_id: str) -> CodeSnippet:
    snippet = (
        db.query(CodeSnippet)
        .filter(CodeSnippet.id == snippet_id, CodeSnippet.user_id == user_id)
        .first()
    )
    if not snippet:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Snippet not found")
    return snippet


@router.get("/snippets", response_model=list[SnippetResponse])
async def list_snippets(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return (
        db.query(CodeSnippet)
        .filter(CodeSnippet.user_id == current_user.id)
        .order_by(CodeSnippet.updated_at.desc())
        .all()
    )


@router.post("/snippets", response_model=SnippetResponse)
async def create_snippet(
    snippet_data: SnippetCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    snippet = CodeSnippet(user_id=current_user.id, **snippet_data.model_dump())
    db.add(snippet)
    db.commit()
    db.refresh(snippet)
    return snippet


@router.put("/snippets/{snippet_id}", response_model=SnippetResponse)
async def update_snippet(
    snippet_id: str,
    snippet_data: SnippetUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    snippet = _get_snippet(db, snippet_id, current_user.id)
    for field, value in snippet_data.model_dump(exclude_unset=True).items():
        # stdin is the only nullable column
        if value is None and field != "stdin":
            continue
        setattr(snippet, field, value)
    db.commit()
    db.refresh(snippet)
    return snippet


@router.delete("/snippets/{snippet_id}")
async def delete_snippet(
    snippet_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    snippet = _get_snippet(db, snippet_id, current_user.id)
    db.delete(snippet)
    db.commit()
    logger.info("[Playground] Deleted snippet %s", snippet_id)
    return {"status": "deleted"}
