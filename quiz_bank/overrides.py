"""
One-off corrections for specific questions in published sets.

Each Override pairs a predicate with a transform. The table is applied
after normalization (see quiz_bank.parsing.apply_overrides), so fixing a
bad answer key never means touching the normalizer itself.

Matching is by prompt text. If a set is re-worded the override simply stops
applying, so keep the matchers narrow and check them when sets change.
"""
from dataclasses import dataclass, replace
from typing import Callable, List

from quiz_bank.models import Question
from quiz_bank.parsing import find_option_index


@dataclass(frozen=True)
class Override:
    name: str
    matches: Callable[[Question], bool]
    apply: Callable[[Question], Question]


def prompt_mentions(*fragments: str, q_type: str = "multiple") -> Callable[[Question], bool]:
    """Predicate: question of q_type whose prompt contains every fragment (case-insensitive)."""
    needles = [f.lower() for f in fragments]

    def matches(q: Question) -> bool:
        text = (q.prompt or "").lower()
        return q.type == q_type and all(n in text for n in needles)

    return matches


def answer_with_option(label: str) -> Callable[[Question], Question]:
    """Transform: point correct_answer at the option whose text is label, if any."""

    def apply(q: Question) -> Question:
        idx = find_option_index(q.options, label)
        if idx < 0:
            return q
        return replace(q, correct_answer=idx)

    return apply


# Formwork stripping time for beam bottoms is 21 days; the source paper's key is wrong.
FORMWORK_BEAM_BOTTOM = Override(
    name="formwork-beam-bottom-21-days",
    matches=prompt_mentions("shutters", "bottom support", "beam"),
    apply=answer_with_option("21 days"),
)

DEFAULT_OVERRIDES: List[Override] = [FORMWORK_BEAM_BOTTOM]
