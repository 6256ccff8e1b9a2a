"""
QA Extractor: Question/Answer Text Parser
============================================

What:  Turns the model's line-oriented "Q<n>: ... / A<n>: ..." output into
       an ordered list of QAPair objects.
How:   Walks the lines two at a time. Line i must start with "Q" and line
       i+1 with "A"; the content of each is whatever follows the first ":".
Who:   Called by ExtractionService after the model returns.

Pairing Rules:
    - Only the leading letter is checked ("Q1" may pair with "A7").
    - The cursor always advances by two lines. A stray line between a
      question and its answer misaligns every pair after it; those pairs are
      dropped, not re-synchronized.
    - Lines are taken as given. A leading blank line shifts the pairing by
      one, so callers pass text that is already trimmed.
    - A pair is kept only if both question and answer are non-empty.
    - The result is never empty: the sentinel pair stands in for "nothing
      found".

Example:
    >>> parse_qa_text("Q1: What is 2+2?\\nA1: 4")
    [QAPair(question='What is 2+2?', answer='4')]
"""

import logging
from typing import List, Sequence

from qa_extractor.schemas.qa import QAPair

logger = logging.getLogger(__name__)

QUESTION_PREFIX = "Q"
ANSWER_PREFIX = "A"

NO_QUESTIONS = "No questions detected"
NO_ANSWERS = "No answers detected"


def sentinel_pairs() -> List[QAPair]:
    """Fresh one-element list holding the "nothing detected" pair."""
    return [QAPair(question=NO_QUESTIONS, answer=NO_ANSWERS)]


def _content_after_colon(line: str) -> str:
    # No colon -> empty content, which rejects the pair
    _, sep, rest = line.partition(":")
    return rest.strip() if sep else ""


def parse_qa_text(text: str) -> List[QAPair]:
    """
    Parse model output into question/answer pairs.

    Args:
        text: Raw text returned by the model (may be empty).

    Returns:
        Pairs in order of appearance, or the sentinel list when no valid
        pair was found. Never an empty list.
    """
    lines = text.split("\n") if text else []
    pairs: List[QAPair] = []
    skipped = 0

    for i in range(0, len(lines) - 1, 2):
        question_line, answer_line = lines[i], lines[i + 1]
        if not (
            question_line.startswith(QUESTION_PREFIX)
            and answer_line.startswith(ANSWER_PREFIX)
        ):
            skipped += 1
            continue

        question = _content_after_colon(question_line)
        answer = _content_after_colon(answer_line)
        if question and answer:
            pairs.append(QAPair(question=question, answer=answer))
        else:
            skipped += 1

    logger.debug(
        "Parsed %d QA pairs from %d lines (%d candidate pairs rejected)",
        len(pairs),
        len(lines),
        skipped,
    )

    if not pairs:
        return sentinel_pairs()
    return pairs


def format_qa_text(pairs: Sequence[QAPair]) -> str:
    """
    Render pairs in the canonical numbered form the prompt asks for.

    parse_qa_text(format_qa_text(pairs)) == list(pairs) for any pairs whose
    question and answer are single-line and already trimmed.
    """
    lines = []
    for number, pair in enumerate(pairs, start=1):
        lines.append(f"{QUESTION_PREFIX}{number}: {pair.question}")
        lines.append(f"{ANSWER_PREFIX}{number}: {pair.answer}")
    return "\n".join(lines)
