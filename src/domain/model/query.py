"""Lookup query helpers.

A lookup query is the trimmed word. In the URL it travels percent-encoded
the way encodeURIComponent encodes it.
"""

from urllib.parse import quote, unquote

# Characters encodeURIComponent leaves untouched.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def clean_query(word: str | None) -> str:
    return (word or "").strip()


def encode_query(word: str) -> str:
    return quote(word, safe=_URI_COMPONENT_SAFE)


def decode_query(value: str) -> str:
    return unquote(value)
