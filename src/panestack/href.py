"""Query string encoding and relative URL helpers.

Scalar values travel through URLs as strings.  ``parse_search`` restores
the original types where that is unambiguous:

- ``"true"`` / ``"false"`` become booleans
- numeric strings that survive a round trip unchanged become ``int`` or ``float``
- everything else (``"01234"``, ``"+123"``, ``"1e5"``, ``"inf"``) stays a string
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TypeAlias
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit

Scalar: TypeAlias = str | int | float | bool
Params: TypeAlias = dict[str, Scalar]

# Base used to parse relative hrefs; never leaks into results
_DUMMY_BASE = "http://dummy.base/"


def stringify_value(value: Scalar) -> str:
    """Serialize a single scalar the way it appears in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def stringify_params(params: Mapping[str, Scalar]) -> str:
    """Stringify a params mapping into a form-encoded query string (no ``?``)."""
    return urlencode([(key, stringify_value(value)) for key, value in params.items()])


def parse_value(raw: str) -> Scalar:
    """Restore a query string value to the scalar it most likely encoded."""
    if raw == "true":
        return True
    if raw == "false":
        return False
    try:
        as_int = int(raw)
    except ValueError:
        pass
    else:
        return as_int if str(as_int) == raw else raw
    try:
        as_float = float(raw)
    except ValueError:
        return raw
    if math.isfinite(as_float) and str(as_float) == raw:
        return as_float
    return raw


def parse_search(search: str) -> Params:
    """Parse a query string into a flat params dict.

    Accepts the string with or without a leading ``?``.  Keys without a
    value map to ``""``.  When a key repeats, the last value wins.
    """
    params: Params = {}
    for key, raw in parse_qsl(search.removeprefix("?"), keep_blank_values=True):
        params[key] = parse_value(raw)
    return params


def merge_query(url: str, params: Mapping[str, Scalar]) -> str:
    """Set each of *params* on *url*'s query string, overriding same-named keys."""
    parts = urlsplit(url)
    merged: dict[str, str] = dict(parse_qsl(parts.query, keep_blank_values=True))
    for key, value in params.items():
        merged[key] = stringify_value(value)
    return parts._replace(query=urlencode(list(merged.items()))).geturl()


def is_absolute(href: str) -> bool:
    return href.startswith(("http://", "https://"))


@dataclass(frozen=True, slots=True)
class RelativeUrl:
    """An href split into the parts navigation needs.

    Attributes:
        url: Path (or ``origin + path`` for absolute hrefs) plus query
            string, with a single trailing ``/`` removed except for root.
        path: The bare pathname as parsed.
        query_params: Query values from the href merged with explicit params.
            Values from the href itself stay strings.
    """

    url: str
    path: str
    query_params: Params = field(default_factory=dict)


def relative_url(to: str = "", params: Mapping[str, Scalar] | None = None) -> RelativeUrl:
    """Combine an href and extra query params into a single navigable URL.

    Examples::

        relative_url("/user/")                 -> url="/user"
        relative_url("/user", {"tab": "info"}) -> url="/user?tab=info"
        relative_url("/a?x=1", {"y": True})    -> url="/a?x=1&y=true"
    """
    parts = urlsplit(urljoin(_DUMMY_BASE, to))
    query_params: Params = dict(parse_qsl(parts.query, keep_blank_values=True))
    query_params.update(params or {})

    pathname = parts.path or "/"
    base = f"{parts.scheme}://{parts.netloc}{pathname}" if is_absolute(to) else pathname
    if base.endswith("/") and len(base) > 1:
        base = base[:-1]

    search = stringify_params(query_params)
    return RelativeUrl(
        url=f"{base}?{search}" if search else base,
        path=pathname,
        query_params=query_params,
    )


def is_external_href(href: str, origin: str) -> bool:
    """Return True when *href* resolves to a different origin than *origin*."""
    try:
        target = urlsplit(urljoin(origin, href))
        current = urlsplit(origin)
    except ValueError:
        return False
    return (target.scheme, target.netloc) != (current.scheme, current.netloc)
