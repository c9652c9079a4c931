"""Tests for text normalization and sentence segmentation."""

from chiro_digest.summarize.text import normalize_text, segment_sentences


def test_normalize_collapses_whitespace_and_strips_symbols():
    assert normalize_text("Hello,\n\n  world\u2122 \u2014 ok!") == "Hello, world  ok!"


def test_normalize_keeps_allowed_punctuation():
    assert normalize_text("a-b; c: d? e, f. g!") == "a-b; c: d? e, f. g!"


def test_normalize_treats_non_breaking_space_as_whitespace():
    assert normalize_text("spinal\u00a0care") == "spinal care"


def test_normalize_empty_input():
    assert normalize_text("") == ""
    assert normalize_text("   \n\t ") == ""


def test_segment_splits_on_terminal_punctuation_runs():
    text = (
        "Short one. This sentence is definitely longer than thirty characters!!! "
        "Another very long sentence follows right here?"
    )
    assert segment_sentences(text) == (
        "This sentence is definitely longer than thirty characters",
        "Another very long sentence follows right here",
    )


def test_segment_length_threshold_is_strict():
    exactly = "a" * 30
    longer = "b" * 31
    assert segment_sentences(f"{exactly}. {longer}.") == (longer,)


def test_segment_custom_threshold():
    assert segment_sentences("Twenty one characters. Tiny.", min_chars=20) == ("Twenty one characters",)


def test_segment_is_restartable():
    sentences = segment_sentences("The first sentence is long enough to keep. The second one is long enough too.")
    assert list(sentences) == list(sentences)
    assert len(sentences) == 2
