"""AI helpers for the playground: fix, explain and score code."""

import logging
from typing import Optional
from mentor.services import ai

logger = logging.getLogger(__name__)

ASSISTANT_ACTIONS = ("fix", "explain", "score")

SYSTEM_PROMPTS = {
    "fix": """You are an expert code debugger. Analyze the code and error, then provide:
1. The corrected code
2. Explanation of what was wrong
3. Step-by-step fix explanation

Format your response as JSON with keys: correctedCode, explanation, steps (array of strings)""",
    "explain": """You are a programming teacher. Explain the code in simple terms:
1. What the code does overall
2. Break down each important section
3. Explain the logic flow
4. Describe the expected output

Format your response as JSON with keys: overview, breakdown (array of {line, explanation}), logic, expectedOutput""",
    "score": """You are a code quality reviewer. Evaluate the code on:
- Readability (0-100)
- Best practices (0-100)
- Efficiency (0-100)
- Error handling (0-100)
- Overall score (0-100)

Also provide: level (Excellent/Good/Needs Improvement/Poor), suggestions (array of strings), complexity analysis.

Format as JSON with keys: readability, bestPractices, efficiency, errorHandling, overall, level, suggestions, complexity""",
}


def build_user_prompt(
    action: str,
    code: str,
    language: str,
    error: Optional[str] = None,
    output: Optional[str] = None,
) -> str:
    code_block = f"Language: {language}\n\nCode:\n```{language}\n{code}\n```\n\n"
    if action == "fix":
        return f"{code_block}Error:\n{error or 'No error provided'}\n\nFix this code and explain the issue."
    if action == "explain":
        output_block = f"Output:\n{output}\n\n" if output else ""
        return f"{code_block}{output_block}Explain this code in detail."
    if action == "score":
        return f"{code_block}Score this code and provide improvement suggestions."
    raise ValueError(f"Unsupported action: {action}")


async def assist(
    action: str,
    code: str,
    language: str,
    error: Optional[str] = None,
    output: Optional[str] = None,
) -> dict:
    logger.info("[Assistant] action=%s language=%s", action, language)
    text = await ai.generate_text(
        build_user_prompt(action, code, language, error, output),
        system_instruction=SYSTEM_PROMPTS[action],
        json_output=True,
    )
    try:
        return ai.parse_json_object(text)
    except ValueError:
        return {"raw": text}
