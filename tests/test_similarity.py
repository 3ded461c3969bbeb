from __future__ import annotations

import pytest

from capcap.core.similarity import (ChangeKind, ChangeResult, classify, last_non_empty_line,
                                    levenshtein_distance)


@pytest.mark.parametrize("text", ["", "a", "Hello world", "ünïcödé", "line\nbreak"])
def test_distance_to_self_is_zero(text: str) -> None:
    assert levenshtein_distance(text, text) == 0


@pytest.mark.parametrize("text", ["", "x", "Hello", "sixteen chars!!!"])
def test_distance_from_empty_is_length(text: str) -> None:
    assert levenshtein_distance("", text) == len(text)
    assert levenshtein_distance(text, "") == len(text)


def test_distance_classic_examples() -> None:
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("flaw", "lawn") == 2
    assert levenshtein_distance("Hello wor1d", "Hello world") == 1


def test_distance_treats_composed_and_decomposed_as_equal() -> None:
    assert levenshtein_distance("caf\u00e9", "cafe\u0301") == 0


def test_add_new_line_when_no_previous_text() -> None:
    assert classify("", "Hello") == ChangeResult(ChangeKind.ADD_NEW_LINE, "Hello")


def test_exact_match_is_no_change() -> None:
    assert classify("Hello world", "Hello world").kind is ChangeKind.NO_CHANGE


def test_small_difference_updates_last_line() -> None:
    result = classify("Hello wor1d", "Hello world", threshold=0.10)
    assert result == ChangeResult(ChangeKind.UPDATE_LAST_LINE, "Hello world")


def test_large_difference_adds_new_line() -> None:
    result = classify("Hello", "Completely different sentence", threshold=0.10)
    assert result == ChangeResult(ChangeKind.ADD_NEW_LINE, "Completely different sentence")


def test_blank_new_text_is_no_change() -> None:
    assert classify("Hello", "   \n\t ").kind is ChangeKind.NO_CHANGE
    assert classify("", "").kind is ChangeKind.NO_CHANGE


def test_new_text_is_trimmed_in_result() -> None:
    assert classify("", "  Hi there \n") == ChangeResult(ChangeKind.ADD_NEW_LINE, "Hi there")
    assert classify("Hi there", "  Hi there  ").kind is ChangeKind.NO_CHANGE


def test_compares_against_last_non_empty_line_only() -> None:
    previous = "Something unrelated\nHello wor1d\n\n"
    assert classify(previous, "Hello world").kind is ChangeKind.UPDATE_LAST_LINE


def test_whitespace_only_last_line_counts_as_missing() -> None:
    assert classify("First line\n   ", "First line").kind is ChangeKind.ADD_NEW_LINE


def test_ratio_equal_to_threshold_adds_new_line() -> None:
    # 1 edit over 10 characters is exactly 0.10, which is not below 0.10.
    assert classify("abcdefghij", "abcdefghiX", threshold=0.10).kind is ChangeKind.ADD_NEW_LINE
    assert classify("abcdefghij", "abcdefghiX", threshold=0.11).kind is ChangeKind.UPDATE_LAST_LINE


def test_threshold_is_configurable() -> None:
    assert classify("abc", "abd", threshold=0.5).kind is ChangeKind.UPDATE_LAST_LINE
    assert classify("abc", "abd", threshold=0.0).kind is ChangeKind.ADD_NEW_LINE


def test_classify_is_deterministic() -> None:
    results = {classify("Hello wor1d", "Hello world") for _ in range(20)}
    assert results == {ChangeResult(ChangeKind.UPDATE_LAST_LINE, "Hello world")}


def test_last_non_empty_line() -> None:
    assert last_non_empty_line("") == ""
    assert last_non_empty_line("a\nb\n\n") == "b"
    assert last_non_empty_line("  padded  ") == "padded"
