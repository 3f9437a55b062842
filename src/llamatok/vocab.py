"""
Bidirectional token string <-> id vocabulary.
"""

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Final

from .errors import MalformedVocabularyError, UnknownTokenIdError
from .types import Token, VocabMap

# reserved word-boundary marker: "▁" (LOWER ONE EIGHTH BLOCK)
WORD_BOUNDARY: Final[str] = "▁"

log = logging.getLogger(__name__)


class Vocabulary:
    """
    Immutable mapping between token strings and dense ids ``0 .. V-1``.

    The forward table is a read-only dict view and the inverse table a tuple
    indexed by id, so one instance can be shared between threads.
    """

    __slots__ = ("_str_to_id", "_id_to_str")

    def __init__(self, vocab_map: VocabMap) -> None:
        """
        Build the vocabulary from a token string -> id mapping.

        :param vocab_map: Mapping whose values must be exactly ``{0, ..., V-1}``.
        :raises MalformedVocabularyError: If an id is not a non-negative int,
            or the ids contain duplicates or gaps.
        """
        size = len(vocab_map)
        # id -> string, filled by position so duplicates and gaps show up as collisions/holes
        inverse: list[str | None] = [None] * size

        for seq, tok in vocab_map.items():
            # bool is an int subclass but never a valid id
            if not isinstance(tok, int) or isinstance(tok, bool) or tok < 0:
                raise MalformedVocabularyError(
                    "token id must be a non-negative integer",
                    vocab_size=size,
                    invalid_id=tok,
                )
            if tok >= size:
                raise MalformedVocabularyError(
                    "token ids are not contiguous from 0",
                    vocab_size=size,
                    missing_ids=[i for i, s in enumerate(inverse) if s is None],
                    invalid_id=tok,
                )
            if inverse[tok] is not None:
                raise MalformedVocabularyError(
                    "duplicate token id", vocab_size=size, invalid_id=tok
                )
            inverse[tok] = seq

        self._str_to_id: Mapping[str, Token] = MappingProxyType(dict(vocab_map))
        # every slot is filled: size entries, each id in range and unique
        self._id_to_str: tuple[str, ...] = tuple(inverse)  # type: ignore[arg-type]

        log.debug(f"built vocabulary with {size} tokens")

    def __len__(self) -> int:
        return len(self._id_to_str)

    def __contains__(self, seq: object) -> bool:
        return seq in self._str_to_id

    def __iter__(self) -> Iterator[str]:
        """Iterate token strings in id order."""
        return iter(self._id_to_str)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={len(self)})"

    def get(self, seq: str) -> Token | None:
        """Return the id for ``seq`` or ``None`` when it is not a vocabulary key."""
        return self._str_to_id.get(seq)

    def token_to_id(self, seq: str) -> Token:
        """
        Return the id for a token string.

        :raises KeyError: If ``seq`` is not in the vocabulary.
        """
        return self._str_to_id[seq]

    def id_to_token(self, tok: Token) -> str:
        """
        Return the token string for an id.

        :raises UnknownTokenIdError: If ``tok`` is not an int in ``[0, V)``.
        """
        # reject negatives explicitly: tuple indexing would wrap around
        if (
            isinstance(tok, bool)
            or not isinstance(tok, int)
            or not 0 <= tok < len(self._id_to_str)
        ):
            raise UnknownTokenIdError(
                "token id outside vocabulary", token=tok, vocab_size=len(self)
            )
        return self._id_to_str[tok]

    def as_dict(self) -> dict[str, Token]:
        """Return a mutable copy of the forward mapping, ordered by id."""
        return {seq: tok for tok, seq in enumerate(self._id_to_str)}
