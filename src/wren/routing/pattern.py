"""Route pattern compiler.

Turns one pattern string such as ``/users/$id`` or ``/files/$$rest`` into a
compiled ``Matcher``. The DSL:

``literal``
    Matches itself exactly.
``$name``
    One path segment (no ``/``), captured as ``name``.
``$name?``
    Same, but optional, together with the character just before it:
    ``/posts/$id?`` matches ``/posts`` and ``/page-$n?`` matches ``/page``.
``$$name``
    Everything that remains (one or more characters, ``/`` included).
    Only legal as the final token.

Every compiled expression is anchored at both ends and accepts one
optional trailing slash.
"""

import re
from dataclasses import dataclass, field

from wren.errors import MalformedPattern

# Token scanner: a catch-all, a capture (with optional marker), or a run of
# literal characters. A "$" with no name after it yields an empty name.
_TOKEN_RE = re.compile(r"\$\$(?P<rest>\w*)|\$(?P<name>\w*)(?P<optional>\?)?|(?P<literal>[^$]+)")

_SEGMENT_CAPTURE = r"[^/]+"
_REST_CAPTURE = r".+"


@dataclass(frozen=True, slots=True)
class PatternToken:
    """One piece of a pattern segment.

    ``kind`` is ``"literal"``, ``"param"`` or ``"rest"``.
    """

    kind: str
    value: str
    optional: bool = False


@dataclass(frozen=True, slots=True)
class PatternSegment:
    """A ``/``-separated segment of a route pattern."""

    raw: str
    tokens: tuple[PatternToken, ...]

    @property
    def is_dynamic(self) -> bool:
        return "$" in self.raw

    @property
    def is_catch_all(self) -> bool:
        return any(token.kind == "rest" for token in self.tokens)

    @property
    def dynamic_count(self) -> int:
        """Number of captures inside this segment (``$a-$b`` has two)."""
        return sum(1 for token in self.tokens if token.kind != "literal")


def split_segments(pattern: str) -> list[str]:
    """Split a pattern on ``/``, keeping the empty leading segment.

    ``"/posts/$id"`` -> ``["", "posts", "$id"]``. The comparator counts
    segments this way, so ``/`` and ``/posts`` differ by one segment.
    """
    return pattern.split("/")


def parse_pattern(pattern: str) -> list[PatternSegment]:
    """Parse a pattern into segments and tokens, validating the DSL.

    Raises:
        MalformedPattern: on a ``$`` without a name, a capture name that is
            not a Python identifier, a repeated capture name, or a
            catch-all that is not the final token.
    """
    segments: list[PatternSegment] = []
    seen: set[str] = set()
    raw_segments = split_segments(pattern)

    for index, raw in enumerate(raw_segments):
        tokens: list[PatternToken] = []
        for m in _TOKEN_RE.finditer(raw):
            if m.group("literal") is not None:
                tokens.append(PatternToken("literal", m.group("literal")))
                continue

            is_rest = m.group("rest") is not None
            name = m.group("rest") if is_rest else m.group("name")
            if not name:
                raise MalformedPattern(pattern, "'$' must be followed by a capture name")
            if not name.isidentifier():
                raise MalformedPattern(pattern, f"capture name {name!r} is not an identifier")
            if name in seen:
                raise MalformedPattern(pattern, f"capture name {name!r} is used twice")
            seen.add(name)

            if is_rest:
                if index != len(raw_segments) - 1 or m.end() != len(raw):
                    raise MalformedPattern(pattern, f"catch-all '$${name}' must be the final token")
                tokens.append(PatternToken("rest", name))
            else:
                tokens.append(PatternToken("param", name, optional=m.group("optional") is not None))

        segments.append(PatternSegment(raw=raw, tokens=tuple(tokens)))

    return segments


def _segment_regex(segment: PatternSegment) -> str:
    """Build the regex for one segment, including its leading ``/``."""
    tokens = segment.tokens

    if len(tokens) == 1 and tokens[0].kind == "rest":
        return f"(?:/(?P<{tokens[0].value}>{_REST_CAPTURE}))"

    parts: list[str] = []
    # Literal text not yet emitted, starting with the segment separator.
    pending = "/"
    for token in tokens:
        if token.kind == "literal":
            pending += token.value
            continue

        capture = _REST_CAPTURE if token.kind == "rest" else _SEGMENT_CAPTURE
        group = f"(?P<{token.value}>{capture})"
        if token.optional and pending:
            # The character before an optional capture is optional with it:
            # "/posts/$id?" accepts "/posts", "/page-$n?" accepts "/page".
            parts.append(re.escape(pending[:-1]))
            parts.append(f"(?:{re.escape(pending[-1])}{group})?")
        elif token.optional:
            parts.append(f"{group}?")
        else:
            parts.append(re.escape(pending))
            parts.append(group)
        pending = ""

    parts.append(re.escape(pending))
    return "".join(parts)


def _regex_source(segments: list[PatternSegment]) -> str:
    # Drop the empty segment before the leading "/" and the one after a
    # trailing "/"; the trailing slash is re-added as optional below.
    body = segments[1:] if segments and segments[0].raw == "" else segments
    if body and body[-1].raw == "":
        body = body[:-1]

    source = "".join(_segment_regex(segment) for segment in body)

    # A root catch-all ("/$$all") also accepts "/" itself.
    if len(body) == 1 and body[0].is_catch_all and len(body[0].tokens) == 1:
        source += "?"

    return f"^{source}/?$"


def pattern_to_regex(pattern: str) -> str:
    """Translate a route pattern into an anchored regular expression source."""
    return _regex_source(parse_pattern(pattern))


@dataclass(frozen=True, slots=True)
class Matcher:
    """A compiled route pattern.

    Stateless and immutable, so one instance serves any number of
    concurrent requests.
    """

    pattern: str
    regex: re.Pattern[str] = field(repr=False, compare=False)
    param_names: tuple[str, ...] = ()
    is_catch_all: bool = False

    def match(self, path: str) -> dict[str, str] | None:
        """Return the captures for *path*, or ``None`` if it does not match.

        Captures that did not take part in the match (an absent optional
        segment) are left out rather than mapped to ``""``.
        """
        m = self.regex.match(path)
        if m is None:
            return None
        return {name: value for name, value in m.groupdict().items() if value is not None}


def compile_pattern(pattern: str) -> Matcher:
    """Compile a route pattern into a ``Matcher``.

    Raises ``MalformedPattern`` if the pattern is not valid DSL.
    """
    segments = parse_pattern(pattern)
    source = _regex_source(segments)
    try:
        regex = re.compile(source)
    except re.error as exc:
        raise MalformedPattern(pattern, str(exc)) from exc

    names = tuple(
        token.value for segment in segments for token in segment.tokens if token.kind != "literal"
    )
    return Matcher(
        pattern=pattern,
        regex=regex,
        param_names=names,
        is_catch_all=any(segment.is_catch_all for segment in segments),
    )
