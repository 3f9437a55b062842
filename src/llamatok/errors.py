"""Custom exception hierarchy for llamatok tokenization errors."""

from .types import Token


class LlamaTokError(Exception):
    """Base exception for all llamatok errors."""


class MalformedVocabularyError(LlamaTokError):
    """Raised when vocabulary ids do not form a contiguous zero-based range."""

    def __init__(
        self,
        message: str,
        *,
        vocab_size: int | None = None,
        missing_ids: list[Token] | None = None,
        invalid_id: object | None = None,
    ) -> None:
        """Initialize with optional context that gets appended to the message."""
        extra = " "
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        # only show the first few gaps for large vocabularies
        if missing_ids:
            shown = ", ".join(str(tok) for tok in missing_ids[:5])
            if len(missing_ids) > 5:
                shown += ", ..."
            extra += f"(missing ids: {shown}) "
        if invalid_id is not None:
            extra += f"(invalid id: {invalid_id!r}) "
        super().__init__(message + extra)
        self.vocab_size = vocab_size
        self.missing_ids = missing_ids
        self.invalid_id = invalid_id


class MalformedMergeRuleError(LlamaTokError):
    """Raised when a merge description is not exactly two space-separated parts."""

    def __init__(
        self, message: str, *, rule: object | None = None, index: int | None = None
    ) -> None:
        extra = " "
        if index is not None:
            extra += f"(index: {index}) "
        if rule is not None:
            extra += f"(rule: {rule!r}) "
        super().__init__(message + extra)
        self.rule = rule
        self.index = index


class UnknownMergeTokenError(LlamaTokError):
    """Raised when a merge rule references a string absent from the vocabulary."""

    def __init__(
        self,
        message: str,
        *,
        rule: str | None = None,
        index: int | None = None,
        token: str | None = None,
    ) -> None:
        extra = " "
        if index is not None:
            extra += f"(index: {index}) "
        if rule is not None:
            extra += f"(rule: {rule!r}) "
        if token is not None:
            extra += f"(token: {token!r}) "
        super().__init__(message + extra)
        self.rule = rule
        self.index = index
        self.token = token


class UnknownSymbolError(LlamaTokError):
    """Raised when encoding meets a character with no singleton vocabulary entry."""

    def __init__(
        self, message: str, *, symbol: str, position: int | None = None
    ) -> None:
        """
        Initialize UnknownSymbolError with symbol details.

        :param message: Error message.
        :param symbol: The offending character.
        :param position: Index of the character in the input text, ``None`` for
            the implicit leading word-boundary marker.
        """
        extra = f" (symbol: {symbol!r} U+{ord(symbol):04X}) "
        if position is not None:
            extra += f"(position: {position}) "
        super().__init__(message + extra)
        self.symbol = symbol
        self.position = position


class UnknownTokenIdError(LlamaTokError):
    """Raised when decoding meets an id outside the vocabulary range."""

    def __init__(
        self, message: str, *, token: object, vocab_size: int | None = None
    ) -> None:
        extra = f" (invalid token: {token!r}) "
        if vocab_size is not None:
            extra += f"(vocab size: {vocab_size}) "
        super().__init__(message + extra)
        self.token = token
        self.vocab_size = vocab_size


class ModelLoadError(LlamaTokError):
    """Raised when loading or saving a tokenizer artifact fails."""

    def __init__(self, message: str, *, model_path: str | None = None) -> None:
        extra = " "
        if model_path:
            extra += f"(path: {model_path}) "
        super().__init__(message + extra)
        self.model_path = model_path
