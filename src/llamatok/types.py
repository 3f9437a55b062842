"""
Core types for tokenization.
"""

from collections.abc import Mapping

type Token = int
type TokenPair = tuple[Token, Token]
type VocabMap = Mapping[str, Token]
