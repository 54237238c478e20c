"""Route pattern parsing and compilation.

Patterns are ``/``-delimited literal segments; a segment written as
``[name]`` captures any run of non-separator characters.
"""

import re

from panestack.routing.route import CompiledRoute, PathSegment, RouteDefinition

# A whole segment of the form [name]
_PARAM_SEGMENT_RE = re.compile(r"^\[([^\]/]+)\]$")

# Capture pattern substituted for each dynamic segment
PARAM_PATTERN = r"([^/]+)"


def parse_pattern(path: str) -> list[PathSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/"              -> []
        "/users"         -> [PathSegment("users")]
        "/users/[id]"    -> [PathSegment("users"), PathSegment("[id]", is_param=True, param_name="id")]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        param_match = _PARAM_SEGMENT_RE.match(part)
        if param_match:
            segments.append(PathSegment(value=part, is_param=True, param_name=param_match.group(1)))
        else:
            segments.append(PathSegment(value=part))
    return segments


def build_regex(segments: list[PathSegment]) -> re.Pattern[str]:
    """Build an anchored regex from parsed segments.

    Literal text is escaped, so ``.`` or ``+`` in a pattern match only
    themselves.
    """
    if not segments:
        return re.compile(r"^/$")
    body = "".join(
        "/" + (PARAM_PATTERN if seg.is_param else re.escape(seg.value)) for seg in segments
    )
    return re.compile(f"^{body}$")


def compile_route(definition: RouteDefinition) -> CompiledRoute:
    """Compile a route definition into a matcher."""
    segments = parse_pattern(definition.path)
    return CompiledRoute(
        definition=definition,
        segments=tuple(segments),
        pattern=build_regex(segments),
        param_names=tuple(seg.param_name for seg in segments if seg.param_name is not None),
    )


def match_route(route: CompiledRoute, path: str) -> dict[str, str] | None:
    """Match *path* against *route*; return params in declaration order, or None."""
    match = route.pattern.match(path)
    if match is None:
        return None
    return dict(zip(route.param_names, match.groups(), strict=True))
