"""
Core Byte Pair Encoding (BPE) operations over a fixed, ordered merge list.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Final

import regex as re

from .errors import MalformedMergeRuleError, UnknownMergeTokenError
from .types import Token, TokenPair
from .vocab import Vocabulary

# "<left> <right>": exactly one space, so neither part may contain one
MERGE_PATTERN: Final = re.compile(r"([^ ]*) ([^ ]*)")

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MergeRule:
    """Replace ``left`` immediately followed by ``right`` with ``result``."""

    left: Token
    right: Token
    result: Token

    @property
    def pair(self) -> TokenPair:
        return (self.left, self.right)


def parse_merge(desc: object, index: int | None = None) -> tuple[str, str]:
    """
    Split a merge description into its left and right token strings.

    :param desc: Merge description of the form ``"<left> <right>"``.
    :param index: Position of the description in the merge list, for error context.
    :raises MalformedMergeRuleError: If ``desc`` is not a string of exactly two
        space-separated parts.
    """
    if not isinstance(desc, str):
        raise MalformedMergeRuleError(
            "merge rule must be a string", rule=desc, index=index
        )
    m = MERGE_PATTERN.fullmatch(desc)
    if m is None:
        raise MalformedMergeRuleError(
            "merge rule must be two parts separated by a single space",
            rule=desc,
            index=index,
        )
    return m.group(1), m.group(2)


def compile_merges(
    descs: Iterable[object], vocab: Vocabulary
) -> tuple[MergeRule, ...]:
    """
    Resolve merge descriptions into id-level merge rules, keeping list order.

    :param descs: Ordered merge descriptions; index 0 has the highest priority.
    :param vocab: Vocabulary the left, right and merged strings must belong to.
    :raises MalformedMergeRuleError: If a description is not two space-separated parts.
    :raises UnknownMergeTokenError: If a part or the concatenation is not in ``vocab``.
    """
    rules: list[MergeRule] = []

    for i, desc in enumerate(descs):
        left, right = parse_merge(desc, index=i)
        ids: list[Token] = []
        for seq in (left, right, left + right):
            tok = vocab.get(seq)
            if tok is None:
                raise UnknownMergeTokenError(
                    "merge rule references a token missing from the vocabulary",
                    rule=desc,  # type: ignore[arg-type]
                    index=i,
                    token=seq,
                )
            ids.append(tok)
        rules.append(MergeRule(*ids))

    log.debug(f"compiled {len(rules)} merge rules")
    return tuple(rules)


def bpe_merge(tokens: list[Token], rule: MergeRule) -> list[Token]:
    """
    Replace every non-overlapping occurrence of ``rule.pair`` in one left-to-right pass.

    A freshly merged token is not reconsidered by the same rule, so ``a a a``
    under ``a a -> b`` becomes ``b a``.
    """
    newtoks: list[Token] = []
    left, right, result = rule.left, rule.right, rule.result

    i = 0
    n = len(tokens)
    while i < n:
        # check if we can form a pair and it matches the target
        if i < n - 1 and tokens[i] == left and tokens[i + 1] == right:
            newtoks.append(result)
            i += 2
        else:
            newtoks.append(tokens[i])
            i += 1

    return newtoks


def apply_merges(tokens: list[Token], rules: Sequence[MergeRule]) -> list[Token]:
    """
    Run each rule once, in list order, over the working token sequence.

    This is not frequency-driven BPE: the rule order fixes the outcome and a
    rule is never revisited after later rules have run.

    Cost is O(len(rules) * len(tokens)).
    """
    for rule in rules:
        # merges only shrink the sequence; nothing left to pair up
        if len(tokens) < 2:
            break
        # skip the rebuild when the pair cannot occur
        if rule.left not in tokens:
            continue
        tokens = bpe_merge(tokens, rule)
    return tokens
