"""llamatok: Llama-style BPE tokenization over a fixed vocabulary and merge list."""

from ._bpe import MergeRule
from .errors import (
    LlamaTokError,
    MalformedMergeRuleError,
    MalformedVocabularyError,
    ModelLoadError,
    UnknownMergeTokenError,
    UnknownSymbolError,
    UnknownTokenIdError,
)
from .loader import from_dict, from_pretrained, save, to_dict
from .tokenizer import LlamaTokenizer, build, decode, encode
from .vocab import WORD_BOUNDARY, Vocabulary

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("llamatok")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "LlamaTokenizer",
    "Vocabulary",
    "MergeRule",
    "WORD_BOUNDARY",
    "build",
    "encode",
    "decode",
    "from_dict",
    "from_pretrained",
    "save",
    "to_dict",
    "LlamaTokError",
    "MalformedVocabularyError",
    "MalformedMergeRuleError",
    "UnknownMergeTokenError",
    "UnknownSymbolError",
    "UnknownTokenIdError",
    "ModelLoadError",
]
