from typing import List

import pytest

from docsift.highlight.codec import decode_terms, encode_terms


def test_encode_doubles_delimiter_inside_terms() -> None:
    assert encode_terms(["a~b"]) == "a~~b"
    assert encode_terms(["install", "guide"]) == "install~guide"


def test_decode_keeps_escaped_delimiter_in_one_term() -> None:
    assert decode_terms("a~~b") == ["a~b"]


def test_decode_splits_on_lone_delimiter() -> None:
    assert decode_terms("a~b") == ["a", "b"]


@pytest.mark.parametrize("fragment", ["", None, "~", "~~~"])
def test_decode_without_terms_is_empty_or_best_effort(fragment) -> None:
    out = decode_terms(fragment)
    assert isinstance(out, list)
    assert all(t for t in out)


def test_decode_empty_fragment_means_nothing_to_highlight() -> None:
    assert decode_terms("") == []
    assert decode_terms("~") == []


def test_decode_drops_empty_segments() -> None:
    assert decode_terms("~a~b~") == ["a", "b"]


@pytest.mark.parametrize(
    "terms",
    [
        ["install", "guide"],
        ["a~b"],
        ["~lead", "trail~"],
        ["über", "naïve", "日本語"],
        ["with space", "100%", "a&b=c"],
        ["single"],
        [],
    ],
)
def test_round_trip(terms: List[str]) -> None:
    assert decode_terms(encode_terms(terms)) == terms


def test_decode_run_of_three_delimiters_is_not_split() -> None:
    # Ambiguous input: neither delimiter in the run is a lone one
    assert decode_terms("a~~~b") == ["a~~b"]
