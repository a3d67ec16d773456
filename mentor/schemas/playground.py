from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ExecuteCodeRequest(BaseModel):
    language: Optional[str] = None
    code: Optional[str] = None
    stdin: Optional[str] = None


class ExecuteCodeResponse(BaseModel):
    output: str
    stderr: str
    exit_code: int
    execution_time: str


class AssistRequest(BaseModel):
    action: str
    code: str
    language: str
    error: Optional[str] = None
    output: Optional[str] = None


class SnippetCreate(BaseModel):
    title: str
    language: str
    code: str
    stdin: Optional[str] = None


class SnippetUpdate(BaseModel):
    title: Optional[str] = None
    language: Optional[str] = None
    code: Optional[str] = None
    stdin: Optional[str] = None


class SnippetResponse(BaseModel):
    id: str
    title: str
    language: str
    code: str
    stdin: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
