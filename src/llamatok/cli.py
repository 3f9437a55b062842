"""Command line interface for encoding and decoding with a tokenizer artifact."""

import argparse
import logging
import sys

from .errors import LlamaTokError
from .loader import from_pretrained


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="llamatok",
        description="Encode and decode text with a Llama-style BPE tokenizer.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log loading details to stderr.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="Print the token ids for TEXT.")
    enc.add_argument("--model", required=True, help="Path to tokenizer.json.")
    enc.add_argument("text", help="Text to encode.")

    dec = sub.add_parser("decode", help="Print the text for token IDS.")
    dec.add_argument("--model", required=True, help="Path to tokenizer.json.")
    dec.add_argument("ids", type=int, nargs="*", help="Token ids to decode.")

    voc = sub.add_parser("vocab", help="Write a human-readable vocabulary listing.")
    voc.add_argument("--model", required=True, help="Path to tokenizer.json.")
    voc.add_argument("--out", required=True, help="Output .vocab file.")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        tokenizer = from_pretrained(args.model)

        match args.command:
            case "encode":
                print(" ".join(str(tok) for tok in tokenizer.encode(args.text)))
            case "decode":
                print(tokenizer.decode(args.ids))
            case "vocab":
                tokenizer.save_vocab(args.out)
    except LlamaTokError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0
