"""Resume upload storage, text extraction and AI review."""

import io
import os
import logging
import time
from typing import Optional
import PyPDF2
from PyPDF2.errors import PdfReadError
from mentor.services import ai

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".pdf", ".doc", ".docx", ".txt"}
MAX_RESUME_BYTES = 10 * 1024 * 1024
MAX_RESUME_CHARS = 12000

SYSTEM_PROMPT = (
    "You are an expert resume reviewer specializing in tech industry applications. "
    "Provide comprehensive, actionable feedback based on industry best practices for ATS "
    "compatibility, technical skills presentation, and professional formatting."
)


def extract_text_from_pdf(pdf_file: bytes) -> str:
    pdf_reader = PyPDF2.PdfReader(io.BytesIO(pdf_file))
    text = ""
    for page in pdf_reader.pages:
        text += (page.extract_text() or "") + "\n"
    return text


def extract_text(file_content: bytes, extension: str) -> Optional[str]:
    """Best-effort text extraction; Word documents are reviewed by name only."""
    try:
        if extension == ".pdf":
            return extract_text_from_pdf(file_content)
        if extension == ".txt":
            return file_content.decode("utf-8", errors="ignore")
    except PdfReadError as e:
        logger.warning("[Resume] Could not read PDF: %s", e)
    return None


def save_resume(uploads_dir: str, user_id: str, filename: str, contents: bytes) -> str:
    """Store the upload under the user's folder and return its relative path."""
    safe_name = os.path.basename(filename).replace(" ", "_")
    relative_path = f"resumes/{user_id}/{int(time.time() * 1000)}-{safe_name}"
    full_path = os.path.join(uploads_dir, *relative_path.split("/"))
    os.makedirs(os.path.dirname(full_path), exist_ok=True)
    with open(full_path, "wb") as output_file:
        output_file.write(contents)
    return relative_path


def build_resume_prompt(filename: str, resume_text: Optional[str]) -> str:
    file_ext = os.path.splitext(filename)[1].lstrip(".").lower()
    if file_ext == "pdf":
        kind = "PDF"
    elif file_ext in ("doc", "docx"):
        kind = "Word document"
    else:
        kind = "document"

    content_block = ""
    if resume_text and resume_text.strip():
        content_block = f"\nResume content:\n{resume_text.strip()[:MAX_RESUME_CHARS]}\n"

    return f"""Analyze this {kind} resume (filename: "{filename}") and provide expert feedback.
{content_block}
Provide a detailed evaluation in this format:

**OVERALL SCORE**: [Score out of 100 based on content, filename conventions and best practices]

**FILE FORMAT ASSESSMENT**:
- Evaluate if {file_ext.upper()} is ATS-friendly (PDF is best, DOC/DOCX acceptable)
- Comment on filename professionalism (should be: FirstName_LastName_Resume.{file_ext})

**CRITICAL SUCCESS FACTORS**:

**ATS COMPATIBILITY** (Score: X/25):
- Use standard section headings (Summary, Experience, Education, Skills)
- Avoid tables, text boxes, headers/footers, and graphics
- Use standard fonts (Arial, Calibri, Times New Roman) 10-12pt
- Use simple bullet points, not fancy symbols

**CONTENT STRUCTURE** (Score: X/25):
- Professional summary/objective (2-3 lines max)
- Experience in reverse chronological order
- Quantifiable achievements (increased X by Y%, reduced Z by N hours)
- Action verbs (Led, Developed, Implemented, Optimized)
- 1-2 pages maximum (1 page for <10 years experience)

**TECHNICAL SKILLS PRESENTATION** (Score: X/25):
- Group by category (Languages, Frameworks, Tools, Cloud, Databases)
- Be specific with versions/proficiency levels
- Match job description keywords
- Include certifications prominently

**PROFESSIONAL FORMATTING** (Score: X/25):
- Consistent date formats (MM/YYYY)
- No personal info beyond email, phone, LinkedIn
- No spelling/grammar errors
- Clean white space and margins

**TOP 5 ACTION ITEMS**:
1. [Specific actionable improvement]
2. [Specific actionable improvement]
3. [Specific actionable improvement]
4. [Specific actionable improvement]
5. [Specific actionable improvement]

**RED FLAGS TO AVOID**:
- Generic objectives
- Duties instead of achievements
- Too many buzzwords without context
- Employment gaps without explanation

**TECH INDUSTRY SPECIFIC TIPS**:
- GitHub/Portfolio links, side projects, open source contributions
- Tech stack for each role

Provide practical, encouraging feedback that will improve their job search success."""


async def analyze_resume(filename: str, resume_text: Optional[str]) -> str:
    logger.info("[Resume] Analyzing %s (%s chars extracted)", filename, len(resume_text or ""))
    return await ai.generate_text(
        build_resume_prompt(filename, resume_text),
        system_instruction=SYSTEM_PROMPT,
    )
