"""Loading and saving tokenizer artifacts."""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from ._decorators import measure_time
from .errors import ModelLoadError
from .tokenizer import LlamaTokenizer

MODEL_SUFFIX: Final[str] = ".json"
MODEL_TYPE: Final[str] = "BPE"

log = logging.getLogger(__name__)


def from_dict(
    document: Mapping[str, Any], *, model_path: str | None = None
) -> LlamaTokenizer:
    """
    Build a tokenizer from a parsed artifact.

    Only ``model.vocab`` and ``model.merges`` are read; any other field is
    ignored.

    :param document: Parsed artifact with a ``model`` object.
    :param model_path: Source path, only used for error context.
    :raises ModelLoadError: If ``model``, ``model.vocab`` or ``model.merges`` is
        missing or has the wrong shape.
    :raises MalformedVocabularyError: If the vocabulary ids are invalid.
    :raises MalformedMergeRuleError: If a merge entry is malformed.
    :raises UnknownMergeTokenError: If a merge references an unknown token.
    """
    if not isinstance(document, Mapping):
        raise ModelLoadError("artifact must be a JSON object", model_path=model_path)

    model = document.get("model")
    if not isinstance(model, Mapping):
        raise ModelLoadError("artifact has no 'model' object", model_path=model_path)

    vocab = model.get("vocab")
    if not isinstance(vocab, Mapping):
        raise ModelLoadError("'model.vocab' must be an object", model_path=model_path)

    merges = model.get("merges")
    if not isinstance(merges, list):
        raise ModelLoadError("'model.merges' must be an array", model_path=model_path)

    model_type = model.get("type")
    if model_type is not None and model_type != MODEL_TYPE:
        log.warning(f"artifact model type is {model_type!r}, reading it as BPE")

    tokenizer = LlamaTokenizer.build(vocab, merges)

    log.info(
        f"tokenizer built: {tokenizer.vocab_size()} tokens, "
        f"{len(tokenizer.merges)} merge rules"
    )
    return tokenizer


@measure_time
def from_pretrained(model_path: str | Path) -> LlamaTokenizer:
    """
    Load a tokenizer from a JSON artifact on disk.

    :param model_path: Path to the artifact, usually ``tokenizer.json``.
    :return: Tokenizer built from the artifact's vocabulary and merges.
    :raises ModelLoadError: If the file does not exist, is not valid JSON, or
        lacks the ``model.vocab`` / ``model.merges`` fields.

    .. code-block:: python

        tokenizer = from_pretrained("path/to/tokenizer.json")
        tokens = tokenizer.encode("Hello world")
    """
    path = Path(model_path)

    if not path.is_file():
        raise ModelLoadError("model filepath does not exist", model_path=str(path))

    if path.suffix != MODEL_SUFFIX:
        log.warning(f"expected a {MODEL_SUFFIX} artifact, got {path.name}")

    log.info(f"loading model from {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            document = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ModelLoadError(f"invalid JSON artifact: {e}", model_path=str(path)) from e

    return from_dict(document, model_path=str(path))


def to_dict(tokenizer: LlamaTokenizer) -> dict[str, Any]:
    """Return the minimal artifact document describing ``tokenizer``."""
    vocab = tokenizer.vocab
    merges = [
        f"{vocab.id_to_token(rule.left)} {vocab.id_to_token(rule.right)}"
        for rule in tokenizer.merges
    ]
    return {
        "model": {
            "type": MODEL_TYPE,
            "vocab": vocab.as_dict(),
            "merges": merges,
        }
    }


def save(tokenizer: LlamaTokenizer, model_path: str | Path) -> None:
    """
    Save a tokenizer as a JSON artifact readable by :func:`from_pretrained`.

    Merge order is preserved.
    """
    path = Path(model_path)
    # create directory if does not exist
    path.parent.mkdir(parents=True, exist_ok=True)

    log.info(f"saving tokenizer to {path}")

    with path.open("w", encoding="utf-8", newline="\n") as f:
        json.dump(to_dict(tokenizer), f, ensure_ascii=False, indent=2)
        f.write("\n")

    log.info("tokenizer saved successfully")
