"""Payee normalization used to group postings by counterparty."""

import re

_ANNOTATION_RE = re.compile(r"\s*\([^()]*\)\s*")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_payee(description: str) -> str:
    """Lower-case a description, drop parenthesized annotations and trim it.

    ``"Coffee Shop (ref 42)"`` becomes ``"coffee shop"``. Inner whitespace runs
    collapse to one space so that removing an annotation mid-string never leaves
    a double space, which keeps the function idempotent.
    """
    text = description.lower()
    previous = None
    while previous != text:
        previous = text
        text = _ANNOTATION_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()
