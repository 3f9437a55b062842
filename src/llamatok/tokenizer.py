"""
Llama-style BPE tokenizer over a fixed vocabulary and ordered merge list.
"""

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from ._bpe import MergeRule, apply_merges, compile_merges
from ._sanitise import render_token
from .errors import UnknownSymbolError
from .types import Token, VocabMap
from .vocab import WORD_BOUNDARY, Vocabulary

log = logging.getLogger(__name__)


class LlamaTokenizer:
    """
    Tokenizer holding an immutable vocabulary and merge rule list.

    Encoding maps every character to its singleton token and then applies
    each merge rule once, in list order. There is no byte fallback: a
    character without its own vocabulary entry makes encoding fail.

    Instances are never mutated after construction and may be shared across
    threads.
    """

    def __init__(self, vocab: Vocabulary, merges: Sequence[MergeRule]) -> None:
        """Wrap an already validated vocabulary and compiled merge rules."""
        self._vocab = vocab
        self._merges: tuple[MergeRule, ...] = tuple(merges)

    @classmethod
    def build(
        cls, vocab_map: VocabMap, merge_descs: Iterable[str]
    ) -> "LlamaTokenizer":
        """
        Validate a raw vocabulary and merge list and build a tokenizer from them.

        :param vocab_map: Token string -> id mapping with ids exactly ``{0, ..., V-1}``.
        :param merge_descs: Ordered ``"<left> <right>"`` merge descriptions.
        :raises MalformedVocabularyError: If the ids are not a contiguous zero-based range.
        :raises MalformedMergeRuleError: If a description is not two space-separated parts.
        :raises UnknownMergeTokenError: If a merge references a string not in the vocabulary.
        """
        vocab = Vocabulary(vocab_map)
        merges = compile_merges(merge_descs, vocab)
        return cls(vocab, merges)

    @property
    def vocab(self) -> Vocabulary:
        return self._vocab

    @property
    def merges(self) -> tuple[MergeRule, ...]:
        return self._merges

    def vocab_size(self) -> int:
        """Return the number of tokens in the vocabulary."""
        return len(self._vocab)

    def token_to_id(self, seq: str) -> Token:
        return self._vocab.token_to_id(seq)

    def id_to_token(self, tok: Token) -> str:
        return self._vocab.id_to_token(tok)

    def encode(self, text: str) -> list[Token]:
        """
        Encode text into a sequence of tokens.

        Spaces become word-boundary markers and one marker is prepended to any
        non-empty text before the merge rules run.

        :param text: Text to encode.
        :returns: Encoded token sequence, empty for empty text.
        :raises UnknownSymbolError: If a character has no singleton vocabulary entry.
        """
        if not text:
            return []

        symbols = WORD_BOUNDARY + text.replace(" ", WORD_BOUNDARY)

        tokens: list[Token] = []
        for pos, ch in enumerate(symbols):
            tok = self._vocab.get(ch)
            if tok is None:
                raise UnknownSymbolError(
                    "character not in tokenizer vocabulary",
                    symbol=ch,
                    # shift by the prepended marker to index into the caller's text
                    position=pos - 1 if pos else None,
                )
            tokens.append(tok)

        return apply_merges(tokens, self._merges)

    def decode(self, tokens: Iterable[Token]) -> str:
        """
        Decode a sequence of tokens back into text.

        A single leading word-boundary marker is dropped; every other marker
        becomes a space.

        :raises UnknownTokenIdError: If any token id is outside ``[0, V)``.
        """
        text = "".join(self._vocab.id_to_token(tok) for tok in tokens)
        if text.startswith(WORD_BOUNDARY):
            text = text[1:]
        return text.replace(WORD_BOUNDARY, " ")

    def save_vocab(self, path: str | Path) -> None:
        """
        Write a human-readable vocabulary listing.

        Tokens produced by a merge rule show the pair they come from; when
        several rules produce the same token the earliest rule is shown.
        """
        vocab_path = Path(path)
        vocab_path.parent.mkdir(parents=True, exist_ok=True)

        log.debug(f"saving vocab to {vocab_path}")

        derivations: dict[Token, MergeRule] = {}
        for rule in self._merges:
            derivations.setdefault(rule.result, rule)

        with vocab_path.open("w", encoding="utf-8", newline="\n") as f:
            for tok, seq in enumerate(self._vocab):
                subword = render_token(seq)
                # token arises from merging: show derivation from child tokens
                if tok in derivations:
                    rule = derivations[tok]
                    subword0 = render_token(self._vocab.id_to_token(rule.left))
                    subword1 = render_token(self._vocab.id_to_token(rule.right))
                    f.write(f"[{tok}] [{subword0}][{subword1}] -> {subword}\n")
                else:
                    f.write(f"[{tok}] {subword}\n")

        log.info(f"vocab listing written to {vocab_path}")

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            f"(vocab_size={self.vocab_size()}, merges={len(self._merges)})"
        )


def build(vocab_map: VocabMap, merge_descs: Iterable[str]) -> LlamaTokenizer:
    """Build a tokenizer from a raw vocabulary and ordered merge descriptions."""
    return LlamaTokenizer.build(vocab_map, merge_descs)


def encode(tokenizer: LlamaTokenizer, text: str) -> list[Token]:
    """Encode ``text`` with ``tokenizer``."""
    return tokenizer.encode(text)


def decode(tokenizer: LlamaTokenizer, tokens: Iterable[Token]) -> str:
    """Decode ``tokens`` with ``tokenizer``."""
    return tokenizer.decode(tokens)
