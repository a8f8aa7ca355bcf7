"""Scanning position over ASN.1 source text"""

import re
import typing

from baclib.asn1 import common


Pattern = typing.Union[str, typing.Pattern]
"""Literal string or regular expression matched at current position"""

Transform = typing.Union[str, typing.Callable[[typing.Any], typing.Any]]
"""Literal substitution or function applied to successful match"""


class Skip(typing.NamedTuple):
    more: bool
    """input remains after skipped text"""
    comment: typing.Optional[str]
    """comment text of skipped run"""


class Token(typing.NamedTuple):
    value: typing.Any
    """matched string, ``re.Match`` or transformed value"""
    offset: int
    """offset of first matched character"""
    comment: typing.Optional[str]
    """comment immediately preceding match"""


_insignificant = re.compile(r'(?:\s|--[^\n]*)+')
_comment = re.compile(r'--([^\n]*)')


class Cursor:
    """Scanning position over line ending normalized text

    Whitespace and ``--`` comments, which extend to the end of line, are
    insignificant and skipped before each match. Matching never consumes
    input on failure.

    """

    def __init__(self, content: str):
        self._content = content
        self._offset = 0

    @property
    def content(self) -> str:
        return self._content

    @property
    def offset(self) -> int:
        """Current position"""
        return self._offset

    def skip(self) -> Skip:
        """Skip whitespace and comments"""
        match = _insignificant.match(self._content, self._offset)
        comment = None
        if match:
            self._offset = match.end()
            lines = [i.strip() for i in _comment.findall(match.group())]
            comment = ' '.join(i for i in lines if i) or None
        return Skip(more=self._offset < len(self._content),
                    comment=comment)

    def try_match(self,
                  pattern: Pattern,
                  transform: typing.Optional[Transform] = None
                  ) -> typing.Optional[Token]:
        """Match pattern after insignificant text

        String patterns are matched literally and regular expressions are
        matched at current position. If `transform` is a string, it
        replaces the matched value. If it is callable, its result,
        applied to matched value, replaces the matched value.

        Returns ``None`` if pattern is not matched.

        """
        start = self._offset
        comment = self.skip().comment
        offset = self._offset

        if isinstance(pattern, str):
            value = (pattern if self._content.startswith(pattern, offset)
                     else None)
            end = offset + len(pattern)
        else:
            value = pattern.match(self._content, offset)
            end = value.end() if value else offset

        if value is None:
            self._offset = start
            return

        self._offset = end
        if isinstance(transform, str):
            value = transform
        elif transform is not None:
            value = transform(value)
        return Token(value=value, offset=offset, comment=comment)

    def require_match(self,
                      pattern: Pattern,
                      transform: typing.Optional[Transform] = None
                      ) -> Token:
        """Match pattern or raise `common.MatchError`"""
        token = self.try_match(pattern, transform)
        if token is None:
            self.skip()
            raise self.error(common.MatchError,
                             f"expected {_pattern_str(pattern)} not found")
        return token

    def error(self,
              cls: typing.Type[common.ParseError],
              message: str,
              offset: typing.Optional[int] = None
              ) -> common.ParseError:
        """Create error positioned at `offset` or current position"""
        return cls(message, self._content,
                   self._offset if offset is None else offset)


def _pattern_str(pattern):
    if isinstance(pattern, str):
        return repr(pattern)
    return f"pattern {pattern.pattern!r}"
