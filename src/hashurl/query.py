"""hashurl.query
Codec for `key=value&key=value` query strings.

Escapes follow encodeURIComponent/decodeURIComponent rather than
application/x-www-form-urlencoded: "+" is a literal plus, not a space.
"""

import logging

from typing import Any, Mapping
from urllib.parse import quote, unquote

import structlog

logger = structlog.wrap_logger(logging.getLogger(__name__))

# encodeURIComponent leaves A-Z a-z 0-9 - _ . ! ~ * ' ( ) alone.
# quote() already treats ALPHA, DIGIT and "_.-~" as safe.
_SAFE_CHARS: str = "!*'()"

_DEFAULT_ENCODING: str = "utf-8"

QueryValue = str | None | list[str | None]
Query = dict[str, QueryValue]


def coerce_str(data: Any) -> str:
    if isinstance(data, str):
        return data
    logger.debug("coercing non-string input", type=type(data).__name__)
    if data is None:
        return ""
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).decode(_DEFAULT_ENCODING, errors="replace")
    return str(data)


def decode_component(s: str) -> str:
    """decodeURIComponent that never raises. Bad UTF-8 becomes U+FFFD."""
    return unquote(s, encoding=_DEFAULT_ENCODING, errors="replace")


def encode_component(s: str) -> str:
    """encodeURIComponent"""
    return quote(s, safe=_SAFE_CHARS, encoding=_DEFAULT_ENCODING, errors="replace")


def parse_search(search: Any) -> Query:
    """Parses a query string (with or without its leading "?") into an ordered dict.

    A key without "=" maps to None, a key with "=" and nothing after maps to "".
    Repeated keys collapse into a list in the order they were seen.
    """
    search = coerce_str(search)
    if search.startswith("?"):
        search = search[1:]

    result: Query = {}
    if len(search) == 0:
        return result

    for segment in search.split("&"):
        if len(segment) == 0:
            continue
        raw_key, eq, raw_value = segment.partition("=")
        key: str = decode_component(raw_key)
        if len(key) == 0:
            logger.debug("dropping query segment with empty key", segment=segment)
            continue
        value: str | None = decode_component(raw_value) if eq else None

        if key not in result:
            result[key] = value
        elif isinstance(result[key], list):
            result[key].append(value)
        else:
            result[key] = [result[key], value]
    return result


def _value_to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return coerce_str(value)


def stringify_search(query: Mapping[str, Any]) -> str:
    """Serializes a mapping into a query string, without the leading "?".

    None values are left out entirely, so a key that parse_search read as None
    is not written back. List and tuple values produce one pair per element.
    """
    pairs: list[str] = []
    for key, value in query.items():
        if value is None:
            continue
        encoded_key: str = encode_component(_value_to_str(key))
        values = value if isinstance(value, (list, tuple)) else (value,)
        for v in values:
            if v is None:
                continue
            pairs.append(f"{encoded_key}={encode_component(_value_to_str(v))}")
    return "&".join(pairs)


# Names used by the JavaScript API this library mirrors.
parseSearch = parse_search
parseQueryString = parse_search
stringifySearch = stringify_search
