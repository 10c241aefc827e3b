"""Task extraction from transcripts - pure text heuristics, no I/O.

Two pieces live here:

- the deterministic fallback scanner (`extract_with_fallback`), and
- prompt building / response parsing for the model-backed strategy.

The strategies that actually call out to a model are in
`tasktracker.extraction`.
"""

import json
import re

from .tasks import CandidateTask, Priority


class ExtractionError(Exception):
    """Primary extraction could not produce a task list."""

    pass


class ExtractionUnavailable(ExtractionError):
    """The generative text service is absent, unreachable or timed out."""

    pass


class ExtractionParseError(ExtractionError):
    """The generative text service answered with something we can't parse."""

    pass


# Tested in order, first match wins.
ACTION_PHRASES = [
    "need to",
    "have to",
    "must",
    "should",
    "going to",
    "gonna",
    "want to",
    "wanna",
    "don't forget",
    "remember to",
    "remind me to",
    "make sure to",
    "got to",
    "gotta",
]

ACTION_VERBS = [
    "call", "email", "text", "message", "contact",
    "buy", "get", "pick up", "purchase",
    "finish", "complete", "do",
    "schedule", "book", "arrange",
    "send", "submit", "deliver",
    "fix", "repair", "update",
    "clean", "organize", "prepare",
    "review", "check", "verify",
    "meet", "visit", "attend",
    "pay", "transfer", "deposit",
    "write", "draft", "create",
]

HIGH_PRIORITY_KEYWORDS = ["urgent", "asap", "immediately", "critical", "important", "today", "now", "right away"]
LOW_PRIORITY_KEYWORDS = ["eventually", "sometime", "when possible", "no rush", "later", "someday"]

DUE_DATE_KEYWORDS = [
    "today", "tonight",
    "tomorrow", "tomorrow morning", "tomorrow afternoon", "tomorrow evening",
    "next week", "next month",
    "this week", "this weekend",
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
    "by end of day", "by eod", "end of week", "end of month",
]

MIN_TITLE_LENGTH = 4

_SENTENCE_SPLIT = re.compile(r"[.!?]")
_LEADING_FILLER = re.compile(r"^(to |the |a |an )")


def capitalize_first(text: str) -> str:
    """Upper-case the first character, leave the rest alone."""
    return text[:1].upper() + text[1:]


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]


def match_action_phrase(sentence: str) -> tuple[str, str] | None:
    """
    Find the first action-intent phrase in a sentence.

    Returns (phrase, title) where title is the text following the phrase,
    or the whole sentence if nothing follows it.
    """
    lowered = sentence.lower()
    for phrase in ACTION_PHRASES:
        idx = lowered.find(phrase)
        if idx == -1:
            continue
        remainder = sentence[idx + len(phrase):].strip()
        return phrase, capitalize_first(remainder) if remainder else sentence
    return None


def has_action_verb(lowered: str) -> bool:
    return any(lowered.startswith(verb) or f" {verb} " in lowered for verb in ACTION_VERBS)


def detect_priority(lowered: str) -> Priority:
    """High keywords win over low keywords; neither means Medium."""
    if any(keyword in lowered for keyword in HIGH_PRIORITY_KEYWORDS):
        return Priority.HIGH
    if any(keyword in lowered for keyword in LOW_PRIORITY_KEYWORDS):
        return Priority.LOW
    return Priority.MEDIUM


def detect_due_date_phrase(lowered: str) -> str | None:
    for keyword in DUE_DATE_KEYWORDS:
        if keyword in lowered:
            return keyword.title()
    return None


def clean_title(title: str) -> str:
    title = title.strip()
    title = _LEADING_FILLER.sub("", title, count=1)
    return title.strip()


def extract_with_fallback(transcript: str) -> list[CandidateTask]:
    """
    Scan a transcript sentence by sentence for actionable items.

    Deterministic and total: never raises, returns candidates in the order
    their sentences appear.
    """
    tasks = []

    for sentence in split_sentences(transcript):
        lowered = sentence.lower()

        matched = match_action_phrase(sentence)
        if matched is not None:
            title = matched[1]
        elif has_action_verb(lowered):
            title = sentence
        else:
            continue

        title = clean_title(title)
        if len(title) < MIN_TITLE_LENGTH:
            continue

        tasks.append(
            CandidateTask(
                title=capitalize_first(title),
                priority=detect_priority(lowered),
                due_date_phrase=detect_due_date_phrase(lowered),
            )
        )

    return tasks


EXTRACTION_PROMPT = """Extract actionable tasks from the following voice memo transcription.
For each task, provide:
- A clear, concise title
- Priority level (low, medium, or high)
- Due date description if mentioned (e.g., "tomorrow", "next week", "Friday")

Transcription:
{transcript}

Return the tasks as a JSON array with objects containing "title", "priority", and "dueDateDescription" fields.
Only include actual actionable tasks, not observations or notes."""


def build_extraction_prompt(transcript: str) -> str:
    return EXTRACTION_PROMPT.format(transcript=transcript)


def parse_model_response(content: str) -> list[CandidateTask]:
    """
    Parse a model reply into candidates.

    The JSON array is taken from the first '[' to the last ']', so prose
    around it is tolerated. Any structural problem raises
    ExtractionParseError; a partial list is never returned.
    """
    if not isinstance(content, str):
        raise ExtractionParseError(f"Model response is not text: {type(content).__name__}")

    start = content.find("[")
    end = content.rfind("]")
    if start == -1 or end == -1 or end < start:
        raise ExtractionParseError("No JSON array in model response")

    try:
        items = json.loads(content[start:end + 1])
    except json.JSONDecodeError as e:
        raise ExtractionParseError(f"Invalid JSON in model response: {e}") from e

    if not isinstance(items, list):
        raise ExtractionParseError("Model response is not a JSON array")

    tasks = []
    for item in items:
        if not isinstance(item, dict):
            raise ExtractionParseError(f"Expected an object, got {type(item).__name__}")

        title = item.get("title")
        priority = item.get("priority")
        due = item.get("dueDateDescription")

        if not isinstance(title, str) or not title.strip():
            raise ExtractionParseError("Task is missing a title")
        if not isinstance(priority, str):
            raise ExtractionParseError(f"Task {title!r} is missing a priority")
        if due is not None and not isinstance(due, str):
            raise ExtractionParseError(f"Task {title!r} has a non-string dueDateDescription")

        tasks.append(
            CandidateTask(
                title=title.strip(),
                priority=Priority.parse(priority),
                due_date_phrase=due,
            )
        )

    return tasks
