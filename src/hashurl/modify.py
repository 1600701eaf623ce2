"""hashurl.modify
Rewrites the query parameters of a URL-like string, including the query inside its fragment,
without touching anything else in it.
"""

import dataclasses
import enum
import re

from typing import Any, Mapping

from .parse import ParsedUrl, parse_url
from .query import Query, stringify_search

# Everything from the first "?" or "#" on is rebuilt; everything before it is kept verbatim.
_SEARCH_AND_HASH_PAT: re.Pattern[str] = re.compile(r"[?#].*\Z", re.DOTALL)


class QueryEdit(enum.Enum):
    """The two edits that aren't a mapping of keys to merge"""

    KEEP = "keep"
    CLEAR = "clear"


Edit = QueryEdit | Mapping[str, Any] | None


def _apply_edit(query: Query, edit: Edit) -> Query | None:
    """Returns the edited query, or None when the edit leaves it alone.
    Keys mapped to None in a merge are removed.
    """
    if edit is QueryEdit.KEEP:
        return None
    if edit is None or edit is QueryEdit.CLEAR:
        return {}
    if not isinstance(edit, Mapping):
        raise TypeError(f"query edit must be a QueryEdit, None or a mapping, not {type(edit).__name__}")

    result: Query = dict(query)
    for key, value in edit.items():
        if value is None:
            result.pop(key, None)
        elif isinstance(value, (list, tuple)):
            result[key] = list(value)
        else:
            result[key] = value
    return result


def _with_search(search_query: Query) -> str:
    search: str = stringify_search(search_query)
    return f"?{search}" if search else ""


def modify_url_query(url: Any, query: Edit = QueryEdit.KEEP, hash_query: Edit = QueryEdit.KEEP) -> str:
    """Adds, replaces or removes query parameters in url and returns the new url.

    query edits the query after "?", hash_query edits the query inside the "#" fragment.
    Each one is either QueryEdit.KEEP (leave it alone), QueryEdit.CLEAR or None (remove every
    parameter), or a mapping merged onto the existing parameters, where None removes a key.

    e.g. modify_url_query("https://example.com?old=1", {"new": "value", "old": "2"})
    == "https://example.com?old=2&new=value"

    When both edits are KEEP, url comes back unchanged. Any url is accepted; an edit that is
    not a QueryEdit, None or a mapping raises TypeError.
    """
    parsed: ParsedUrl = parse_url(url)
    updates: dict[str, Any] = {}

    new_query: Query | None = _apply_edit(parsed.query, query)
    if new_query is not None:
        updates.update(query=new_query, search=_with_search(new_query))

    new_hash_query: Query | None = _apply_edit(parsed.hash_query, hash_query)
    if new_hash_query is not None:
        hash_search: str = _with_search(new_hash_query)
        hash_body: str = parsed.hash_pathname + hash_search
        updates.update(
            hash_query=new_hash_query,
            hash_search=hash_search,
            hash=f"#{hash_body}" if hash_body else "",
        )

    if len(updates) == 0:
        return parsed.href

    modified: ParsedUrl = dataclasses.replace(parsed, **updates)
    prefix: str = _SEARCH_AND_HASH_PAT.sub("", parsed.href, count=1)
    return prefix + modified.search + modified.hash


# Name used by the JavaScript API this library mirrors.
modifyUrlQuery = modify_url_query
