"""hashurl.parse
A forgiving URL parser for the URL-like strings that show up in client-side routing.
Accepts absolute URLs, custom schemes, protocol-relative and path-relative references,
bare queries and bare fragments, and splits the fragment into its own path and query.
"""

import dataclasses
import logging
import re

from typing import Any, Self

import structlog

from .query import Query, coerce_str, decode_component, parse_search

logger = structlog.wrap_logger(logging.getLogger(__name__))

# None of these rules validate anything. Each one only decides where a component ends.

# scheme = 1*( any char except ":" "/" "?" "#" ) ":"
_SCHEME: str = r"(?P<scheme>[^:/?#]+:)"

# authority = "//" *( any char except "/" "?" "#" )
_AUTHORITY: str = r"(?://(?P<authority>[^/?#]*))"

# path = *( any char except "?" "#" )
_PATH: str = r"(?P<path>[^?#]*)"

# query = "?" *( any char except "#" )
_QUERY: str = r"(?:\?(?P<query>[^#]*))"

# fragment = "#" *( any char )
_FRAGMENT: str = r"(?:#(?P<fragment>.*))"

# url = [ scheme ] [ authority ] path [ query ] [ fragment ]
_URL: str = rf"\A{_SCHEME}?{_AUTHORITY}?{_PATH}{_QUERY}?{_FRAGMENT}?\Z"
_URL_PAT: re.Pattern[str] = re.compile(_URL, re.DOTALL)

# port = *DIGIT
_PORT: str = r"(?::(?P<port>[0-9]*))?"

# IP-literal = "[" *( any char except "]" ) "]" [ ":" port ]
_IP_LITERAL_HOSTPORT_PAT: re.Pattern[str] = re.compile(rf"\A\[(?P<hostname>[^\]]*)\]{_PORT}\Z")

# hostport = hostname [ ":" port ], splitting on the last ":" that only has digits after it
_HOSTPORT_PAT: re.Pattern[str] = re.compile(rf"\A(?P<hostname>.*?){_PORT}\Z", re.DOTALL)


@dataclasses.dataclass(frozen=True)
class ParsedUrl:
    """The pieces of a URL-like string. Build one with parse_url."""

    href: str = ""
    protocol: str = ""
    username: str = ""
    password: str = ""
    origin: str = ""
    host: str = ""
    hostname: str = ""
    port: str = ""
    pathname: str = ""
    search: str = ""
    query: Query = dataclasses.field(default_factory=dict)
    hash: str = ""
    hash_pathname: str = ""
    hash_search: str = ""
    hash_query: Query = dataclasses.field(default_factory=dict)

    # query and hash_query are dicts, so records compare by value but cannot be hashed.
    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def empty(cls, href: str = "") -> Self:
        """A record with every field but href left at its default"""
        return cls(href=href)

    def to_dict(self: Self) -> dict[str, Any]:
        """The record keyed by the camelCase names used by the JavaScript API"""
        return {
            "href": self.href,
            "protocol": self.protocol,
            "username": self.username,
            "password": self.password,
            "origin": self.origin,
            "host": self.host,
            "hostname": self.hostname,
            "port": self.port,
            "pathname": self.pathname,
            "search": self.search,
            "query": _copy_query(self.query),
            "hash": self.hash,
            "hashPathname": self.hash_pathname,
            "hashSearch": self.hash_search,
            "hashQuery": _copy_query(self.hash_query),
        }


def _copy_query(query: Query) -> Query:
    return {k: list(v) if isinstance(v, list) else v for k, v in query.items()}


@dataclasses.dataclass(frozen=True)
class _Authority:
    username: str = ""
    password: str = ""
    hostname: str = ""
    port: str = ""

    @property
    def host(self: Self) -> str:
        """hostname:port"""
        if len(self.port) > 0:
            return f"{self.hostname}:{self.port}"
        return self.hostname


def _parse_authority(authority: str) -> _Authority:
    """[ userinfo "@" ] hostport, where userinfo is everything before the last "@" """
    userinfo, at, hostport = authority.rpartition("@")
    username: str = ""
    password: str = ""
    if at:
        raw_username, _, raw_password = userinfo.partition(":")
        username = decode_component(raw_username)
        password = decode_component(raw_password)

    m: re.Match[str] | None = _IP_LITERAL_HOSTPORT_PAT.match(hostport)
    if m is None:
        m = _HOSTPORT_PAT.match(hostport)
    # _HOSTPORT_PAT matches any string.
    assert m is not None

    return _Authority(
        username=username,
        password=password,
        hostname=m["hostname"],
        port=m["port"] or "",
    )


def _parse_fragment(fragment: str) -> dict[str, Any]:
    """Splits a fragment at its first "?" into hash_pathname and hash_search.
    Any later "?" stays part of hash_search.
    A bare "#" carries nothing, so it leaves every hash field empty.
    """
    if len(fragment) == 0:
        return {}
    hash_pathname, question_mark, hash_query = fragment.partition("?")
    fields: dict[str, Any] = {
        "hash": f"#{fragment}",
        "hash_pathname": hash_pathname,
    }
    if question_mark:
        fields["hash_search"] = f"?{hash_query}"
        fields["hash_query"] = parse_search(hash_query)
    return fields


def parse_url(url: Any) -> ParsedUrl:
    """Parses a URL-like string. Never raises: whatever can't be recognized is left empty.

    e.g. parse_url("https://u:p@abc.com:8443/home?t=1#/list?page=2") gives
    protocol="https:", host="abc.com:8443", pathname="/home", query={"t": "1"},
    hash_pathname="/list", hash_query={"page": "2"}.
    href is always the input, unchanged.
    """
    url = coerce_str(url)
    if len(url) == 0:
        return ParsedUrl.empty()

    m: re.Match[str] | None = _URL_PAT.match(url)
    # Every group is optional and the fragment takes any char, so _URL_PAT matches any string.
    assert m is not None

    scheme: str | None = m["scheme"]
    authority: str | None = m["authority"]
    path: str = m["path"]
    query: str | None = m["query"]
    fragment: str | None = m["fragment"]

    if scheme is None and authority is None and query is None and fragment is None and not path.startswith("/"):
        logger.debug("opaque url, mirroring it into pathname", url=url)
        return dataclasses.replace(ParsedUrl.empty(url), pathname=url)

    fields: dict[str, Any] = {"protocol": scheme or ""}

    if authority is not None:
        parsed_authority: _Authority = _parse_authority(authority)
        fields.update(
            username=parsed_authority.username,
            password=parsed_authority.password,
            host=parsed_authority.host,
            hostname=parsed_authority.hostname,
            port=parsed_authority.port,
        )

    has_origin: bool = len(fields["protocol"]) > 0 and len(fields.get("hostname", "")) > 0
    if has_origin:
        fields["origin"] = f"{fields['protocol']}//{fields['host']}"
        if len(path) == 0:
            path = "/"
    fields["pathname"] = path

    if query is not None:
        fields["search"] = f"?{query}"
        fields["query"] = parse_search(query)

    if fragment is not None:
        fields.update(_parse_fragment(fragment))

    return dataclasses.replace(ParsedUrl.empty(url), **fields)


# Name used by the JavaScript API this library mirrors.
parseUrl = parse_url
