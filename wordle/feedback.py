"""Per-letter guess feedback.

Each position is scored on its own: an exact match is GREEN, a letter that
occurs anywhere in the target is PRESENT, anything else is ABSENT.

Duplicate letters are NOT frequency adjusted. Guessing "EERIE" against "CRANE"
marks every E as PRESENT even though the target holds a single E. Stored
feedback strings and the reports built from them depend on this behaviour,
so the canonical two-pass Wordle algorithm is deliberately not used here.
"""

from __future__ import annotations

from enum import StrEnum

from wordle.errors import InvalidInput

WORD_LENGTH = 5


class Mark(StrEnum):
    GREEN = "G"
    PRESENT = "O"
    ABSENT = "R"


# Clients render PRESENT as yellow.
_DISPLAY = str.maketrans({Mark.PRESENT.value: "Y"})


def compute_feedback(guess: str, target: str) -> str:
    if len(guess) != WORD_LENGTH or len(target) != WORD_LENGTH:
        raise InvalidInput(f"Feedback needs two {WORD_LENGTH}-letter words")

    marks: list[str] = []
    for g, t in zip(guess, target):
        if g == t:
            marks.append(Mark.GREEN.value)
        elif g in target:
            marks.append(Mark.PRESENT.value)
        else:
            marks.append(Mark.ABSENT.value)
    return "".join(marks)


def is_solved(feedback: str) -> bool:
    return feedback == Mark.GREEN.value * WORD_LENGTH


def feedback_for_display(feedback: str) -> str:
    return feedback.translate(_DISPLAY)
