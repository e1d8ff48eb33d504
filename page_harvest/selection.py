"""Turning discovered candidates into the list of links to process."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from .config import SelectionMode
from .models import Candidate

logger = logging.getLogger("page_harvest")

Chooser = Callable[[Sequence[Candidate]], List[str]]


def _parse_choice(answer: str, count: int) -> List[int]:
    """Parse ``"1,3-5"`` style input into zero-based indexes."""
    indexes: List[int] = []
    for token in answer.replace(" ", "").split(","):
        if not token:
            continue
        if "-" in token:
            start_text, end_text = token.split("-", 1)
            start, end = int(start_text), int(end_text)
        else:
            start = end = int(token)
        for number in range(start, end + 1):
            if 1 <= number <= count and number - 1 not in indexes:
                indexes.append(number - 1)
    return indexes


def prompt_for_selection(
    candidates: Sequence[Candidate],
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> List[str]:
    """Ask on the terminal which candidates should be downloaded."""
    output_fn("Found these potential items. Select ones to download:")
    for number, candidate in enumerate(candidates, start=1):
        kind = "image" if candidate.has_image else "page"
        output_fn(f"  {number:2d}. [{kind}] {candidate.title} ({candidate.href})")

    while True:
        answer = input_fn("Numbers or ranges (e.g. 1,3-5), 'all', or blank for none: ")
        answer = answer.strip().lower()
        if answer == "all":
            return [candidate.href for candidate in candidates]
        try:
            indexes = _parse_choice(answer, len(candidates))
        except ValueError:
            output_fn(f"Could not understand {answer!r}, try again.")
            continue
        return [candidates[index].href for index in sorted(indexes)]


def select_candidates(
    candidates: Sequence[Candidate],
    mode: SelectionMode,
    limit: int,
    chooser: Optional[Chooser] = None,
) -> List[str]:
    """Pick hrefs to process from the first ``limit`` candidates."""
    offered = list(candidates[:limit])
    if mode is SelectionMode.AUTO:
        logger.info("  [Auto] Selecting all %d candidates...", len(offered))
        return [candidate.href for candidate in offered]
    chooser = chooser or prompt_for_selection
    return chooser(offered)
