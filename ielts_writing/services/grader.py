"""
services/grader.py

Essay grading through an OpenAI-compatible chat completions API.
Public API:
  - evaluate_essay(request, api_key) -> Evaluation

Local rules applied regardless of what the model says:
  - fewer than 20 words: no API call, fixed zero-band evaluation
  - below the task minimum (150 / 250): overall band capped at 6.5 and
    word_count_penalty set
  - word_count and task_type in the result always come from the request
  - invalid bandUpgrades / errorPatterns / vocabularyImprovements entries
    are dropped; only missing or bad criteria make a reply malformed

Failures raise GraderError (GraderConfigError when no API key is set).
"""

import json
import logging
import os
import re
import time
from typing import Optional

from openai import OpenAI, RateLimitError, APIError
from pydantic import ValidationError

from config import (
    API_KEY_ENV, GRADER_BASE_URL, GRADER_TEMPERATURE, IDEAL_WORD_RANGE,
    MIN_EVALUABLE_WORDS, MIN_WORDS, MODEL_NAME, PENALTY_BAND_CAP,
)
from ielts_writing.models.evaluation import (
    BandUpgradeSuggestion, CriteriaScores, ErrorPattern, Evaluation,
    ExaminerFeedback, GradeRequest, VocabSuggestion,
)
from ielts_writing.services.examiner_prompts import (
    EXAMINER_SYSTEM_PROMPT, build_task1_prompt, build_task2_prompt,
)
from ielts_writing.services.text_metrics import count_words

# ── Logger ───────────────────────────────────────────────────────────────────
logger = logging.getLogger(__name__)


class GraderError(RuntimeError):
    """Grading failed: transport, API or malformed response."""


class GraderConfigError(GraderError):
    """Grader is not configured (missing credential)."""


MISSING_KEY_MESSAGE = f"Missing {API_KEY_ENV} in environment variables"

# ── Constants ────────────────────────────────────────────────────────────────
_MAX_API_RETRIES = 3
_BACKOFF_BASE = 1.0
_RATE_LIMIT_MAX_RETRIES = 5
_RATE_LIMIT_BACKOFF_BASE = 2.0

# Set locally after parsing; whatever the model sends for these is discarded
_LOCAL_FIELDS = (
    "wordCount", "word_count", "taskType", "task_type",
    "wordCountPenalty", "word_count_penalty",
)

# Optional lists: bad entries are dropped instead of failing the evaluation
_ENRICHMENT_FIELDS = {
    "bandUpgrades": BandUpgradeSuggestion,
    "band_upgrades": BandUpgradeSuggestion,
    "errorPatterns": ErrorPattern,
    "error_patterns": ErrorPattern,
    "vocabularyImprovements": VocabSuggestion,
    "vocabulary_improvements": VocabSuggestion,
}


# ══════════════════════════════════════════════════════════════════════════════
# Public API
# ══════════════════════════════════════════════════════════════════════════════

def evaluate_essay(request: GradeRequest, api_key: Optional[str] = None) -> Evaluation:
    """
    Grade one essay.

    Args:
        request: prompt, task type, optional data outline and the essay.
        api_key: Grader credential. Defaults to the GROQ_API_KEY environment variable.

    Returns:
        Evaluation with the local word-count rules applied.

    Raises:
        GraderConfigError: no API key.
        GraderError:       API failure or a response that is not a valid evaluation.
    """
    word_count = count_words(request.essay)

    if word_count < MIN_EVALUABLE_WORDS:
        logger.info(f"Essay too short to grade ({word_count} words), skipping API call")
        return too_short_evaluation(word_count, request.task_type)

    key = api_key if api_key is not None else os.getenv(API_KEY_ENV, "")
    client = _make_client(key)
    if client is None:
        raise GraderConfigError(MISSING_KEY_MESSAGE)

    below_minimum = word_count < MIN_WORDS[request.task_type]
    user_prompt = _build_prompt(request, word_count, below_minimum)

    raw = _call_openai(EXAMINER_SYSTEM_PROMPT, user_prompt, client)
    if raw is None:
        raise GraderError("No response from AI")

    evaluation = _parse_evaluation(raw)
    return apply_word_count_rules(evaluation, word_count, request.task_type)


def too_short_evaluation(word_count: int, task_type: str) -> Evaluation:
    """Fixed zero-band result for submissions under 20 words."""
    return Evaluation(
        criteria=CriteriaScores(task_achievement=0, coherence=0, lexical=0, grammar=0),
        overall_band=0,
        word_count=word_count,
        task_type=task_type,
        feedback=ExaminerFeedback(
            strengths=[],
            improvements=["The submission is too short to be evaluated."],
            tips=[
                f"Please write a complete essay (at least {MIN_WORDS['Task 1']} words "
                f"for Task 1, {MIN_WORDS['Task 2']} for Task 2)."
            ],
        ),
        model_answer="No model answer generated for incomplete submission.",
    )


def apply_word_count_rules(evaluation: Evaluation, word_count: int, task_type: str) -> Evaluation:
    """
    Echo the local word count and task type, and apply the length penalty:
    below the task minimum the overall band may not exceed 6.5.
    """
    update = {"word_count": word_count, "task_type": task_type}
    if word_count < MIN_WORDS[task_type]:
        update["word_count_penalty"] = True
        if evaluation.overall_band > PENALTY_BAND_CAP:
            logger.info(
                f"Capping band {evaluation.overall_band} to {PENALTY_BAND_CAP} "
                f"({word_count} < {MIN_WORDS[task_type]} words)"
            )
            update["overall_band"] = PENALTY_BAND_CAP
    return evaluation.model_copy(update=update)


# ══════════════════════════════════════════════════════════════════════════════
# Prompt and response handling
# ══════════════════════════════════════════════════════════════════════════════

def _build_prompt(request: GradeRequest, word_count: int, below_minimum: bool) -> str:
    ideal_range = IDEAL_WORD_RANGE[request.task_type]
    if request.task_type == "Task 1":
        return build_task1_prompt(
            request.prompt, request.essay, word_count,
            request.data_outline, below_minimum, ideal_range,
        )
    return build_task2_prompt(
        request.prompt, request.essay, word_count, below_minimum, ideal_range,
    )


def _parse_evaluation(raw_response: str) -> Evaluation:
    """LLM JSON → Evaluation. Anything unusable raises GraderError."""
    cleaned = _clean_json_response(raw_response)
    if not cleaned:
        raise GraderError("Empty evaluation from AI")

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"Unparsable evaluation JSON: {e}")
        raise GraderError(f"Malformed evaluation from AI: {e.msg}") from e

    if not isinstance(data, dict):
        raise GraderError("Malformed evaluation from AI: expected a JSON object")

    data = _drop_local_fields(data)
    _filter_enrichment(data)

    try:
        return Evaluation.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Evaluation failed validation: {e.error_count()} error(s)")
        raise GraderError(f"Malformed evaluation from AI: {e.errors()[0]['msg']}") from e


def _drop_local_fields(data: dict) -> dict:
    return {k: v for k, v in data.items() if k not in _LOCAL_FIELDS}


def _filter_enrichment(data: dict) -> None:
    """Keep only the enrichment entries that validate. Mutates data."""
    for key, model in _ENRICHMENT_FIELDS.items():
        if key not in data:
            continue
        entries = data[key]
        if not isinstance(entries, list):
            logger.warning(f"Ignoring {key}: expected a list, got {type(entries).__name__}")
            del data[key]
            continue
        kept = []
        for entry in entries:
            try:
                kept.append(model.model_validate(entry))
            except ValidationError:
                continue
        if len(kept) < len(entries):
            logger.warning(f"Dropped {len(entries) - len(kept)} invalid {key} entries")
        data[key] = kept


def _clean_json_response(response_text: str) -> str:
    """Extract the bare JSON object from an LLM reply."""
    if not response_text:
        return ""

    text = re.sub(r"```(?:json)?\s*", "", response_text, flags=re.IGNORECASE)
    text = re.sub(r"```", "", text)
    text = text.strip()

    if text.startswith("{"):
        return text

    match = re.search(r"\{.*\}", text, re.DOTALL)
    if match:
        return match.group(0).strip()

    return ""


# ══════════════════════════════════════════════════════════════════════════════
# OpenAI API calls
# ══════════════════════════════════════════════════════════════════════════════

def _make_client(api_key: str) -> Optional[OpenAI]:
    """Create an OpenAI client for the grading endpoint."""
    if not api_key:
        logger.warning("No grader API key provided.")
        return None
    return OpenAI(api_key=api_key, base_url=GRADER_BASE_URL)


def _call_openai(
    system_prompt: str,
    user_content: str,
    client: Optional[OpenAI] = None,
    max_retries: int = _MAX_API_RETRIES,
) -> Optional[str]:
    """Chat completion with exponential backoff. None when every attempt failed."""
    if client is None:
        return None

    last_exception: Optional[Exception] = None
    effective_retries = max_retries

    attempt = 0
    while attempt < effective_retries:
        attempt += 1
        try:
            response = client.chat.completions.create(
                model=MODEL_NAME,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content},
                ],
                temperature=GRADER_TEMPERATURE,
                response_format={"type": "json_object"},
            )
            return response.choices[0].message.content
        except RateLimitError as e:
            last_exception = e
            effective_retries = _RATE_LIMIT_MAX_RETRIES
            if attempt < effective_retries:
                wait = _RATE_LIMIT_BACKOFF_BASE * (2 ** (attempt - 1))
                logger.warning(f"Rate limited, retrying in {wait:.1f}s ({attempt}/{effective_retries})")
                time.sleep(wait)
            else:
                logger.error("Rate limit retries exhausted.")
                break
        except APIError as e:
            last_exception = e
            error_str = str(e).lower()
            is_transient = any(
                k in error_str
                for k in ("timeout", "connection", "unavailable")
            )
            if getattr(e, "status_code", None) in (500, 502, 503, 504):
                is_transient = True
            if attempt < effective_retries and is_transient:
                wait = _BACKOFF_BASE * (2 ** (attempt - 1))
                logger.warning(f"API error, retrying in {wait:.1f}s ({attempt}/{effective_retries})")
                time.sleep(wait)
            else:
                logger.error(f"API error: {e}")
                break
        except Exception as e:
            last_exception = e
            logger.error(f"Unexpected grader error: {type(e).__name__}: {e}")
            break

    logger.error(f"Grader API failed: {last_exception}")
    return None
