"""
=============================================================================
PATTERN MATCHER
=============================================================================

A route signature is ONE regular expression matched against the string
"{METHOD} {PATH}":

    signature:     "GET /products/([0-9]+)/?"
    request line:  "GET /products/42/"

    compiled:      ^GET \\/products\\/([0-9]+)\\/?$
                    ─┬─ ──────────── ────┬──── ─┬─
                     │                   │      └── optional trailing slash
                     │                   └───────── capture group 1 → "42"
                     └───────────────────────────── method is part of the regex

=============================================================================
COMPILATION RULES
=============================================================================

1. Literal "/" is escaped as "\\/". Nothing else is escaped: the path part of
   a signature IS a regex, so callers write groups, classes and quantifiers
   directly.
2. The expression is anchored at both ends (^...$); partial matches never
   count.
3. Because the method is regex too, one signature can accept several verbs:

       "([A-Z]+) /products/?(.*)"     every method, method captured
       "(GET|HEAD) /health"           two methods

=============================================================================
MATCH RESULT
=============================================================================

Group 0 (the whole match) is dropped; the remaining groups come back as a
tuple, left to right, in the order they appear in the signature:

    "GET /a/([a-z]+)/([0-9]+)"  +  "GET /a/foo/7"   →  ("foo", "7")
    "GET /a"                    +  "GET /b"         →  None

Groups that did not take part in the match come back as "" so positional
arguments never shift.

=============================================================================
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple
import logging
import re


logger = logging.getLogger(__name__)

MatchResult = Tuple[str, ...]


@dataclass(frozen=True)
class RouteSignature:
    """
    Method pattern + path pattern of one registration.

    Example:
        RouteSignature.parse("GET /products/([0-9]+)")
        # RouteSignature(method_pattern="GET", path_pattern="/products/([0-9]+)")
    """

    method_pattern: str
    path_pattern: str

    @classmethod
    def parse(cls, signature: str) -> "RouteSignature":
        """Split "METHOD path" at the first space."""
        method, _, path = signature.partition(" ")
        return cls(method_pattern=method, path_pattern=path)

    def __str__(self) -> str:
        return f"{self.method_pattern} {self.path_pattern}"


@lru_cache(maxsize=256)
def compile_signature(signature: str) -> "re.Pattern[str]":
    """
    Compile a signature string into its anchored regex.

    Compilation is a pure function of the string, so results are cached for
    the life of the process.
    """
    return re.compile("^{}$".format(signature.replace("/", "\\/")))


class PatternMatcher:
    """
    Matches route signatures against request lines.

    Usage:
        matcher = PatternMatcher()
        matcher.match("GET /products/([0-9]+)", "GET /products/2")   # ("2",)
    """

    def match(self, signature, request_line: str) -> Optional[MatchResult]:
        """
        Match ``request_line`` against ``signature``.

        Args:
            signature: A ``RouteSignature`` or its "METHOD path" string form.
            request_line: "{METHOD} {PATH}".

        Returns:
            Captured groups (group 0 excluded), or None when there is no match.
        """
        pattern = compile_signature(str(signature))
        found = pattern.match(request_line)

        if found is None:
            logger.debug("skip %r for %r", str(signature), request_line)
            return None

        groups = tuple("" if group is None else group for group in found.groups())
        logger.debug("matched %r for %r: %r", str(signature), request_line, groups)
        return groups
