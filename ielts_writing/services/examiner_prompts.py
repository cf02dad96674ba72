"""
services/examiner_prompts.py

Prompt text sent to the grading model.
Task 1 (data description) and Task 2 (argument essay) are marked on
different first criteria, so each has its own builder.
"""

from typing import Optional, Tuple

from config import MIN_WORDS

EXAMINER_SYSTEM_PROMPT = (
    "You are an experienced IELTS Writing examiner. "
    "Mark strictly against the official IELTS band descriptors and "
    "write Band 8-9 model answers on request. "
    "Respond with a single JSON object only, no markdown."
)

_CRITERIA_COMMON = """\
2. COHERENCE & COHESION (25%)
   9: effortless cohesion, skilful paragraphing.  7: clear progression, range of linking devices.
   6: coherent but some faulty or mechanical linking.  5: inadequate organisation.

3. LEXICAL RESOURCE (25%)
   9: wide range, sophisticated control.  7: sufficient range, awareness of style and collocation.
   6: adequate range, some inaccuracy.  5: limited, repetitive.

4. GRAMMATICAL RANGE & ACCURACY (25%)
   9: full flexibility, rare slips.  7: variety of complex structures, frequent error-free sentences.
   6: mix of simple and complex forms, errors do not impede meaning.  5: limited range, frequent errors."""

_OUTPUT_SHAPE = """\
{{
  "criteria": {{
    "{task_key}": <0.0-9.0 in 0.5 steps>,
    "coherence": <0.0-9.0>,
    "lexical": <0.0-9.0>,
    "grammar": <0.0-9.0>
  }},
  "overallBand": <mean of the four criteria rounded to 0.5>{cap_note},
  "feedback": {{
    "strengths": ["2-3 specific strengths, quoting the essay"],
    "improvements": ["2-3 specific weaknesses with examples"],
    "tips": ["2-3 actionable tips"]
  }},
  "bandUpgrades": [{{"currentBand": <n>, "targetBand": <n + 0.5 or 1>, "suggestions": ["..."]}}],
  "errorPatterns": [{{"type": "grammar|vocabulary|coherence|task", "description": "...",
                     "examples": ["quote"], "frequency": "rare|occasional|frequent",
                     "severity": "minor|moderate|severe"}}],
  "vocabularyImprovements": [{{"original": "...", "alternatives": ["..."], "context": "...", "reason": "..."}}],
  "modelAnswer": "<Band 8-9 answer of {ideal_min}-{ideal_max} words>"
}}

bandUpgrades, errorPatterns and vocabularyImprovements are optional; omit them if you have nothing useful.
The model answer MUST be between {ideal_min} and {ideal_max} words."""


def _word_count_line(word_count: int, minimum: int, below_minimum: bool) -> str:
    line = f"Word Count: {word_count} words"
    if below_minimum:
        line += f"  (BELOW {minimum} MINIMUM - MAX BAND 6.5)"
    return line


def _output_shape(task_key: str, below_minimum: bool, ideal_range: Tuple[int, int]) -> str:
    return _OUTPUT_SHAPE.format(
        task_key=task_key,
        cap_note=", at most 6.5 because of the word count" if below_minimum else "",
        ideal_min=ideal_range[0],
        ideal_max=ideal_range[1],
    )


def build_task1_prompt(
    prompt: str,
    essay: str,
    word_count: int,
    data_outline: Optional[str],
    below_minimum: bool,
    ideal_range: Tuple[int, int],
) -> str:
    """Examiner prompt for a Task 1 data description."""
    outline = f"\nData Reference:\n{data_outline}\n" if data_outline else ""
    return f"""\
IELTS WRITING TASK 1 - EXAMINATION

Task Prompt: "{prompt}"
{_word_count_line(word_count, MIN_WORDS["Task 1"], below_minimum)}
{outline}
Candidate Essay:
\"\"\"{essay}\"\"\"

MARKING CRITERIA
1. TASK ACHIEVEMENT (25%)
   9: all requirements met, clear overview, every key feature highlighted.
   7: clear overview, main features identified.  6: task addressed but overview weak or details irrelevant.
   5: details recounted mechanically with no overview.
   An overview is mandatory, opinions are not allowed and figures must match the data reference.

{_CRITERIA_COMMON}

REQUIRED OUTPUT (JSON)
{_output_shape("taskAchievement", below_minimum, ideal_range)}
Model answer structure: paraphrased introduction, overview, two body paragraphs.
"""


def build_task2_prompt(
    prompt: str,
    essay: str,
    word_count: int,
    below_minimum: bool,
    ideal_range: Tuple[int, int],
) -> str:
    """Examiner prompt for a Task 2 opinion / discussion essay."""
    return f"""\
IELTS WRITING TASK 2 - EXAMINATION

Essay Question: "{prompt}"
{_word_count_line(word_count, MIN_WORDS["Task 2"], below_minimum)}

Candidate Essay:
\"\"\"{essay}\"\"\"

MARKING CRITERIA
1. TASK RESPONSE (25%)
   9: all parts fully addressed, clear position throughout, ideas fully extended.
   7: all parts addressed, clear position, main ideas extended.  6: parts addressed unequally, position unclear at times.
   5: task only partially addressed.
   A clear thesis is mandatory and ideas must be supported with examples.

{_CRITERIA_COMMON}

REQUIRED OUTPUT (JSON)
{_output_shape("taskResponse", below_minimum, ideal_range)}
Model answer structure: introduction with thesis, two body paragraphs, conclusion.
"""
