"""Unit tests for vocabulary validation and merge rule compilation."""

import pytest

import llamatok as ltok
from llamatok._bpe import MergeRule, apply_merges, bpe_merge, parse_merge
from llamatok.errors import (
    LlamaTokError,
    MalformedMergeRuleError,
    MalformedVocabularyError,
    UnknownMergeTokenError,
    UnknownTokenIdError,
)


# Vocabulary
# ---------------------------------------------------------------------------


def test_vocab_bidirectional():
    """Forward and inverse lookups are mutual inverses."""
    vocab = ltok.Vocabulary({"b": 1, "a": 0, "ab": 2})
    assert len(vocab) == 3
    assert list(vocab) == ["a", "b", "ab"]
    for seq in vocab:
        assert vocab.id_to_token(vocab.token_to_id(seq)) == seq
    assert "ab" in vocab
    assert "ba" not in vocab
    assert vocab.get("ba") is None
    assert vocab.as_dict() == {"a": 0, "b": 1, "ab": 2}


def test_vocab_gap():
    """Ids {0, 1, 3} leave a gap at 2."""
    with pytest.raises(MalformedVocabularyError) as excinfo:
        ltok.build({"a": 0, "b": 1, "c": 3}, [])
    assert excinfo.value.vocab_size == 3
    assert excinfo.value.missing_ids == [2]


def test_vocab_not_zero_based():
    """Ids must start at 0."""
    with pytest.raises(MalformedVocabularyError):
        ltok.Vocabulary({"a": 1, "b": 2})


def test_vocab_duplicate_ids():
    """Two strings sharing an id are rejected."""
    with pytest.raises(MalformedVocabularyError) as excinfo:
        ltok.Vocabulary({"a": 0, "b": 0, "c": 1})
    assert excinfo.value.invalid_id == 0


@pytest.mark.parametrize("bad", [-1, "0", 1.0, None, True])
def test_vocab_non_integer_ids(bad):
    """Ids must be non-negative ints."""
    with pytest.raises(MalformedVocabularyError):
        ltok.Vocabulary({"a": bad})


def test_vocab_empty():
    """An empty vocabulary is a valid (if useless) range."""
    vocab = ltok.Vocabulary({})
    assert len(vocab) == 0
    with pytest.raises(UnknownTokenIdError):
        vocab.id_to_token(0)


def test_vocab_is_a_copy():
    """Mutating the input mapping afterwards does not affect the vocabulary."""
    raw = {"a": 0, "b": 1}
    vocab = ltok.Vocabulary(raw)
    raw["c"] = 2
    assert "c" not in vocab
    assert len(vocab) == 2


def test_errors_share_base_class():
    """All construction errors derive from the package base error."""
    for err in (
        MalformedVocabularyError,
        MalformedMergeRuleError,
        UnknownMergeTokenError,
        UnknownTokenIdError,
    ):
        assert issubclass(err, LlamaTokError)


# Merge rules
# ---------------------------------------------------------------------------


def test_parse_merge():
    """A merge description splits on its single space."""
    assert parse_merge("▁ p") == ("▁", "p")
    assert parse_merge("ic k") == ("ic", "k")


@pytest.mark.parametrize("desc", ["ab", "a b c", "a  b", "", 3, ["a", "b"]])
def test_malformed_merge_rule(desc):
    """Anything but exactly two space-separated parts is malformed."""
    with pytest.raises(MalformedMergeRuleError) as excinfo:
        ltok.build({"a": 0, "b": 1, "ab": 2}, ["a b", desc])
    assert excinfo.value.index == 1


@pytest.mark.parametrize(
    ("desc", "missing"),
    [
        ("x b", "x"),
        ("a x", "x"),
        ("b a", "ba"),
        (" b", ""),
    ],
)
def test_unknown_merge_token(desc, missing):
    """Left, right and merged strings must all be vocabulary keys."""
    with pytest.raises(UnknownMergeTokenError) as excinfo:
        ltok.build({"a": 0, "b": 1, "ab": 2}, [desc])
    assert excinfo.value.token == missing
    assert excinfo.value.rule == desc
    assert excinfo.value.index == 0


def test_vocab_checked_before_merges():
    """A bad vocabulary is reported even when the merges are also bad."""
    with pytest.raises(MalformedVocabularyError):
        ltok.build({"a": 0, "b": 2}, ["nonsense"])


def test_duplicate_merge_rules_allowed():
    """Repeated rules are kept in order and each runs once."""
    vocab = {"▁": 0, "a": 1, "aa": 2, "aaaa": 3}
    tok = ltok.build(vocab, ["a a", "a a", "aa aa"])
    assert len(tok.merges) == 3
    # ▁ a a a a a a -> ▁ aa aa aa -> (no bare "a a") -> ▁ aaaa aa
    assert tok.encode("aaaaaa") == [0, 3, 2]


def test_bpe_merge_single_pass():
    """One pass replaces non-overlapping pairs left to right."""
    rule = MergeRule(1, 1, 9)
    assert bpe_merge([1, 1, 1], rule) == [9, 1]
    assert bpe_merge([1, 1, 1, 1], rule) == [9, 9]
    assert bpe_merge([2, 1], rule) == [2, 1]
    assert bpe_merge([], rule) == []


def test_apply_merges_order():
    """Rules are applied in sequence order."""
    rules = [MergeRule(1, 2, 5), MergeRule(5, 3, 6)]
    assert apply_merges([1, 2, 3], rules) == [6]
    assert apply_merges([1, 2, 3], rules[::-1]) == [5, 3]
