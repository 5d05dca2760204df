"""
Chord sequences travel between screens and users as a comma-joined
``chords`` query parameter.
"""

from typing import List, Optional, Sequence
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

QUERY_KEY = "chords"


def encode_sequence(chords: Sequence[str]) -> str:
    return urlencode({QUERY_KEY: ",".join(chords)})


def decode_sequence(value: Optional[str]) -> List[str]:
    """Split a comma-joined value, dropping empty and blank tokens."""
    if not value:
        return []
    return [token for token in value.split(",") if token.strip()]


def sequence_from_url(url: str) -> List[str]:
    values = parse_qs(urlsplit(url).query).get(QUERY_KEY)
    return decode_sequence(values[0]) if values else []


def share_url(base_url: str, chords: Sequence[str]) -> str:
    """``base_url`` with its query replaced by the encoded sequence."""
    parts = urlsplit(base_url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encode_sequence(chords), ""))
