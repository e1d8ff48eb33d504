from __future__ import annotations

from page_harvest.config import SelectionMode
from page_harvest.models import Candidate
from page_harvest.selection import prompt_for_selection, select_candidates


def _candidates(count):
    return [Candidate(title=f"Post {i}", href=f"/post/{i}", has_image=i % 2 == 0) for i in range(count)]


def test_auto_mode_takes_first_candidates_in_order():
    selected = select_candidates(_candidates(20), SelectionMode.AUTO, 15)
    assert selected == [f"/post/{i}" for i in range(15)]


def test_interactive_mode_offers_capped_list_to_chooser():
    offered = []

    def chooser(candidates):
        offered.extend(candidates)
        return [candidates[2].href]

    selected = select_candidates(_candidates(20), SelectionMode.INTERACTIVE, 15, chooser)
    assert len(offered) == 15
    assert selected == ["/post/2"]


def test_prompt_accepts_numbers_and_ranges():
    output = []
    selected = prompt_for_selection(
        _candidates(6),
        input_fn=lambda prompt: "5, 1-2, 9",
        output_fn=output.append,
    )
    assert selected == ["/post/0", "/post/1", "/post/4"]
    assert any("[image] Post 0 (/post/0)" in line for line in output)


def test_prompt_all_and_blank():
    assert prompt_for_selection(_candidates(3), input_fn=lambda p: "ALL", output_fn=lambda s: None) == [
        "/post/0",
        "/post/1",
        "/post/2",
    ]
    assert prompt_for_selection(_candidates(3), input_fn=lambda p: "", output_fn=lambda s: None) == []


def test_prompt_retries_on_garbage():
    answers = iter(["abc", "2"])
    selected = prompt_for_selection(
        _candidates(3),
        input_fn=lambda prompt: next(answers),
        output_fn=lambda s: None,
    )
    assert selected == ["/post/1"]
