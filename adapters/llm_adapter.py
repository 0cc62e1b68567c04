"""
OpenAI chat-completions adapter used by the recipe wizard.

The client is created once in the application lifespan (``connect``) and
reused by request handlers. Every failure is raised as ExternalServiceError so
the API answers 502 AI_UNAVAILABLE.
"""

from typing import Optional, Dict, Any, List
import json
import logging

from openai import OpenAI, OpenAIError

from app.exceptions import ExternalServiceError

logger = logging.getLogger("chefos.llm")

_client: Optional[OpenAI] = None
_model: str = "gpt-4o-mini"

SYSTEM_PROMPT = (
    "You are a culinary editor. You turn a cook's free-form notes into a "
    "structured recipe. Answer with a single JSON object and nothing else."
)

RECIPE_FORMAT = """Return JSON with exactly these keys:
{
  "title": str,
  "description": str,
  "servings": int,
  "difficulty": "easy" | "medium" | "hard",
  "calories": int,
  "steps": [{"order": int, "text": str, "time": int minutes}]
}
Write every text field in language "%s". Use only the listed ingredients."""


def connect(api_key: Optional[str], model: str, timeout: float = 60.0):
    """Initialize the OpenAI client. Without a key the wizard stays unavailable."""
    global _client, _model
    _model = model
    if not api_key:
        _client = None
        logger.warning("OpenAI API key not configured; AI recipe wizard disabled")
        return
    _client = OpenAI(api_key=api_key, timeout=timeout)
    logger.info("OpenAI client initialized (model=%s)", model)


def close():
    global _client
    try:
        if _client is not None:
            _client.close()
            logger.info("OpenAI client closed")
    except Exception:
        logger.exception("Error closing OpenAI client")
    finally:
        _client = None


def is_available() -> bool:
    return _client is not None


def structure_recipe(
    title: str,
    ingredients: List[Dict[str, Any]],
    raw_cooking_text: str,
    language: str,
) -> Dict[str, Any]:
    """
    Ask the model to turn raw cooking notes into a recipe draft.

    Args:
        title: working title typed by the author
        ingredients: [{"name", "quantity", "unit"}] already validated against the catalog
        raw_cooking_text: one free-form text block describing the process
        language: content language code (pl, en, ru)

    Returns:
        Parsed JSON object as produced by the model (not yet normalized)

    Raises:
        ExternalServiceError: client missing, API error, or non-JSON answer
    """
    if _client is None:
        raise ExternalServiceError("AI recipe wizard is not configured")

    ingredient_lines = "\n".join(
        f"- {i['name']}: {i['quantity']} {i['unit']}" for i in ingredients
    )
    user_prompt = (
        f"Title: {title}\n"
        f"Ingredients:\n{ingredient_lines}\n\n"
        f"Cooking notes:\n{raw_cooking_text}\n\n"
        f"{RECIPE_FORMAT % language}"
    )

    try:
        resp = _client.chat.completions.create(
            model=_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
            temperature=0.2,
        )
    except OpenAIError as e:
        logger.error("OpenAI request failed: %s", e)
        raise ExternalServiceError(f"AI provider request failed: {e}") from e

    content = resp.choices[0].message.content or ""
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error("OpenAI returned non-JSON content: %.200s", content)
        raise ExternalServiceError("AI provider returned an invalid recipe draft") from e

    if not isinstance(data, dict):
        raise ExternalServiceError("AI provider returned an invalid recipe draft")
    return data
