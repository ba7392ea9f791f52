"""Prefix, suffix and infix matchers.

A matcher is any callable following the contract below. The easiest way of
getting one is compiling a list of regular expression fragments with the
helpers of this module, which rely on spaCy's own regex compilation.

- ``prefix_search(string)`` returns a match anchored at the start of
  ``string`` (an object with an ``end()`` method, or the end offset as an
  :obj:`int`), or :obj:`None`.
- ``suffix_search(string)`` returns a match anchored at the end of
  ``string`` (an object with a ``start()`` method, or the start offset as an
  :obj:`int`), or :obj:`None`.
- ``infix_finditer(string)`` returns an iterable of non-overlapping matches
  ordered by position (objects with ``start()`` and ``end()`` methods, or
  ``(start, end)`` pairs).
"""

from typing import Any, Callable, Iterable, List, Optional, Tuple

from spacy.util import compile_infix_regex, compile_prefix_regex, compile_suffix_regex

from .errors import MatcherContractError

SearchFunction = Callable[[str], Any]
FinditerFunction = Callable[[str], Iterable[Any]]
MatchFunction = Callable[[str], Any]


def compile_prefix_search(entries: Iterable[str]) -> SearchFunction:
    """Compile prefix regex fragments into a ``prefix_search`` matcher."""
    return compile_prefix_regex(tuple(entries)).search


def compile_suffix_search(entries: Iterable[str]) -> SearchFunction:
    """Compile suffix regex fragments into a ``suffix_search`` matcher."""
    return compile_suffix_regex(tuple(entries)).search


def compile_infix_finditer(entries: Iterable[str]) -> FinditerFunction:
    """Compile infix regex fragments into an ``infix_finditer`` matcher."""
    return compile_infix_regex(tuple(entries)).finditer


def _match_span(match: Any, kind: str, string: str) -> Tuple[int, int]:
    """Get the ``(start, end)`` span of a match object or pair."""
    if isinstance(match, bool):
        raise MatcherContractError(
            f"{kind} matcher returned {match!r} for {string!r}. Matchers must "
            "return a match, an offset or None, not a boolean."
        )
    if isinstance(match, (tuple, list)) and len(match) == 2:
        return match[0], match[1]
    try:
        return match.start(), match.end()
    except AttributeError:
        raise MatcherContractError(
            f"{kind} matcher returned {match!r} for {string!r}, "
            "which is not a match."
        ) from None


def find_prefix(prefix_search: Optional[SearchFunction], string: str) -> int:
    """Get the length of the prefix of ``string``.

    Args:
        prefix_search (:obj:`Optional[SearchFunction]`):
            The prefix matcher. If :obj:`None`, no prefix is ever found.
        string (:obj:`str`):
            The string to search.

    Returns:
        :obj:`int`: The length of the prefix, ``0`` meaning no prefix.

    Raises:
        :obj:`MatcherContractError`: If the match is not anchored at the
        start of ``string``, ends outside of it, or is not a match at all.
    """
    if prefix_search is None:
        return 0
    match = prefix_search(string)
    if match is None:
        return 0
    if isinstance(match, int) and not isinstance(match, bool):
        start, end = 0, match
    else:
        start, end = _match_span(match, "Prefix", string)
    if start == end:
        return 0
    if start != 0 or end < 0 or end > len(string):
        raise MatcherContractError(
            f"Prefix matcher returned span ({start}, {end}) for {string!r}. "
            "Prefixes must start at offset 0 and end within the string."
        )
    return end


def find_suffix(suffix_search: Optional[SearchFunction], string: str) -> int:
    """Get the length of the suffix of ``string``.

    Args:
        suffix_search (:obj:`Optional[SearchFunction]`):
            The suffix matcher. If :obj:`None`, no suffix is ever found.
        string (:obj:`str`):
            The string to search.

    Returns:
        :obj:`int`: The length of the suffix, ``0`` meaning no suffix.

    Raises:
        :obj:`MatcherContractError`: If the match is not anchored at the end
        of ``string``, starts outside of it, or is not a match at all.
    """
    if suffix_search is None:
        return 0
    match = suffix_search(string)
    if match is None:
        return 0
    if isinstance(match, int) and not isinstance(match, bool):
        start, end = match, len(string)
    else:
        start, end = _match_span(match, "Suffix", string)
    if start == end:
        return 0
    if end != len(string) or start < 0 or start > end:
        raise MatcherContractError(
            f"Suffix matcher returned span ({start}, {end}) for {string!r}. "
            "Suffixes must end at the end of the string."
        )
    return end - start


def find_infixes(
    infix_finditer: Optional[FinditerFunction],
    string: str,
) -> List[Tuple[int, int]]:
    """Get the spans of the infixes of ``string``.

    Zero-length matches are dropped.

    Args:
        infix_finditer (:obj:`Optional[FinditerFunction]`):
            The infix matcher. If :obj:`None`, no infixes are ever found.
        string (:obj:`str`):
            The string to search.

    Returns:
        :obj:`List[Tuple[int, int]]`: The ``(start, end)`` spans of the
        infixes, ordered by position.

    Raises:
        :obj:`MatcherContractError`: If a match ends before it starts, lies
        outside ``string``, or overlaps (or precedes) the previous one.
    """
    if infix_finditer is None:
        return []
    spans = []
    cursor = 0
    for match in infix_finditer(string):
        start, end = _match_span(match, "Infix", string)
        if start < 0 or end > len(string) or end < start:
            raise MatcherContractError(
                f"Infix matcher returned span ({start}, {end}) for {string!r}, "
                "which is not a valid span of the string."
            )
        if start < cursor:
            raise MatcherContractError(
                f"Infix matcher returned span ({start}, {end}) for {string!r}, "
                f"which overlaps or precedes the previous match ending at {cursor}."
            )
        if start == end:
            continue
        spans.append((start, end))
        cursor = end
    return spans
