"""Rule-based tokenizer."""

import re
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import spacy
from spacy.vocab import Vocab

from .base import BaseTokenizer
from .cache import CacheInfo, ChunkCache
from .languages import load_rules
from .matchers import (
    FinditerFunction,
    MatchFunction,
    SearchFunction,
    compile_infix_finditer,
    compile_prefix_search,
    compile_suffix_search,
    find_infixes,
    find_prefix,
    find_suffix,
)
from .special_cases import SpecialCaseTable, TokenSpec
from .tokens import Token

# (offset in chunk, length, attribute overrides, rule that produced it)
Segment = Tuple[int, int, Optional[Dict[str, Any]], str]

_CHUNK_RE = re.compile(r"\S+")


class Tokenizer(BaseTokenizer):
    """Tokenizer driven by special cases and prefix, suffix and infix rules.

    The text is first split on whitespace. Each of the resulting chunks is
    then segmented as follows, until nothing is left of it:

    1. If the chunk is a special case, its tokens are emitted.
    2. If ``token_match`` matches the chunk, it is emitted as one token.
    3. A prefix is split off and emitted; go back to 1 with the rest.
    4. A suffix is split off and put aside; go back to 1 with the rest.
    5. If ``url_match`` matches the chunk, it is emitted as one token.
    6. The chunk is split on its infixes.
    7. Otherwise, the chunk is emitted as one token.

    The suffixes put aside are emitted last, in the order they appear in
    the text.

    Results are cached per chunk. Changing the special cases or any of the
    matchers clears the cache.
    """

    def __init__(
        self,
        vocab: Optional[Vocab] = None,
        *,
        rules: Optional[Mapping[str, Iterable[TokenSpec]]] = None,
        prefix_search: Optional[SearchFunction] = None,
        suffix_search: Optional[SearchFunction] = None,
        infix_finditer: Optional[FinditerFunction] = None,
        token_match: Optional[MatchFunction] = None,
        url_match: Optional[MatchFunction] = None,
        keep_whitespace: Optional[bool] = None,
        log_level: Optional[int] = None,
    ):
        """Instanciate a :obj:`Tokenizer`.

        Args:
            vocab (:obj:`Optional[Vocab]`, defaults to an empty vocabulary):
                The spaCy vocabulary the strings of the produced documents are
                interned in.
            rules (:obj:`Optional[Mapping[str, Iterable[TokenSpec]]]`):
                The special cases, mapping each literal to the attributes of
                the tokens it splits into.
            prefix_search (:obj:`Optional[SearchFunction]`):
                Finds the prefix of a string. See :mod:`ruletok.matchers`.
            suffix_search (:obj:`Optional[SearchFunction]`):
                Finds the suffix of a string.
            infix_finditer (:obj:`Optional[FinditerFunction]`):
                Finds the infixes of a string.
            token_match (:obj:`Optional[MatchFunction]`):
                Matches strings that must never be split.
            url_match (:obj:`Optional[MatchFunction]`):
                Matches strings (e.g., URLs) that must not be split on
                infixes, once their prefixes and suffixes are gone.
            keep_whitespace (:obj:`Optional[bool]`, defaults to :obj:`False`):
                Whether to preserve whitespace exactly. If :obj:`False`, any
                run of whitespace is reduced to the
                :attr:`Token.has_space_after` flag of the preceding token. If
                :obj:`True`, whitespace other than a single space after a
                token is emitted as whitespace tokens, so that detokenizing
                gives back the original text.
            log_level (:obj:`Optional[int]`, defaults to ``logging.INFO``):
                The level of the logger.

        Raises:
            :obj:`ConfigurationError`: If any of the special cases is
            malformed.
        """
        super().__init__(vocab=vocab, log_level=log_level)
        if keep_whitespace is None:
            keep_whitespace = False

        self.keep_whitespace = keep_whitespace
        self._lock = threading.RLock()
        self._special_cases = SpecialCaseTable(rules)
        self._matcher_version = 0
        self._prefix_search = prefix_search
        self._suffix_search = suffix_search
        self._infix_finditer = infix_finditer
        self._token_match = token_match
        self._url_match = url_match
        self._cache: ChunkCache[Tuple[Segment, ...]] = ChunkCache()

    @classmethod
    def from_language(
        cls,
        lang: str,
        vocab: Optional[Vocab] = None,
        **kwargs,
    ) -> "Tokenizer":
        """Instanciate a :obj:`Tokenizer` with the rules of a language.

        Args:
            lang (:obj:`str`):
                The ISO 639-1 code of the language (e.g., ``"en"``).
            vocab (:obj:`Optional[Vocab]`, defaults to the vocabulary of a
            blank spaCy pipeline for ``lang``):
                The spaCy vocabulary.
            kwargs:
                Any other parameters to pass to the :obj:`Tokenizer`. They
                take precedence over the rules of the language.

        Returns:
            :obj:`Tokenizer`: The tokenizer.

        Raises:
            :obj:`ValueError`: If the language is not supported, or its
            spaCy language data needs packages that are not installed
            (e.g., SudachiPy for Japanese).
        """
        try:
            rules = load_rules(lang)
            if vocab is None:
                vocab = spacy.blank(lang).vocab
        except ImportError as e:
            raise ValueError(
                f'The rules of language "{lang}" need additional packages: {e}\n'
                "See https://spacy.io/usage/models#languages for what to install."
            ) from e
        # Whitespace never reaches the special cases.
        exceptions = {}
        for literal, specs in rules.exceptions.items():
            if any(char.isspace() for char in literal):
                continue
            exceptions[literal] = specs
        options = {
            "rules": exceptions,
            "prefix_search": (compile_prefix_search(rules.prefixes)
                              if rules.prefixes else None),
            "suffix_search": (compile_suffix_search(rules.suffixes)
                              if rules.suffixes else None),
            "infix_finditer": (compile_infix_finditer(rules.infixes)
                               if rules.infixes else None),
            "token_match": rules.token_match,
            "url_match": rules.url_match,
        }
        options.update(kwargs)
        tokenizer = cls(vocab=vocab, **options)
        tokenizer.logger.info(
            'Loaded tokenization rules for "%s" (%d special cases, %d skipped).',
            lang, len(exceptions), len(rules.exceptions) - len(exceptions)
        )
        return tokenizer

    @property
    def rules(self) -> Dict[str, List[Dict[str, Any]]]:
        """:obj:`Dict[str, List[Dict[str, Any]]]`: The special cases."""
        return self._special_cases.to_dict()

    @rules.setter
    def rules(self, rules: Mapping[str, Iterable[TokenSpec]]):
        with self._lock:
            self._special_cases.replace(rules)
            self._invalidate_cache()

    @property
    def prefix_search(self) -> Optional[SearchFunction]:
        return self._prefix_search

    @prefix_search.setter
    def prefix_search(self, prefix_search: Optional[SearchFunction]):
        with self._lock:
            self._prefix_search = prefix_search
            self._matcher_changed()

    @property
    def suffix_search(self) -> Optional[SearchFunction]:
        return self._suffix_search

    @suffix_search.setter
    def suffix_search(self, suffix_search: Optional[SearchFunction]):
        with self._lock:
            self._suffix_search = suffix_search
            self._matcher_changed()

    @property
    def infix_finditer(self) -> Optional[FinditerFunction]:
        return self._infix_finditer

    @infix_finditer.setter
    def infix_finditer(self, infix_finditer: Optional[FinditerFunction]):
        with self._lock:
            self._infix_finditer = infix_finditer
            self._matcher_changed()

    @property
    def token_match(self) -> Optional[MatchFunction]:
        return self._token_match

    @token_match.setter
    def token_match(self, token_match: Optional[MatchFunction]):
        with self._lock:
            self._token_match = token_match
            self._matcher_changed()

    @property
    def url_match(self) -> Optional[MatchFunction]:
        return self._url_match

    @url_match.setter
    def url_match(self, url_match: Optional[MatchFunction]):
        with self._lock:
            self._url_match = url_match
            self._matcher_changed()

    def add_special_case(self, literal: str, specs: Iterable[TokenSpec]):
        """Add a special case, overwriting any existing one for ``literal``.

        Args:
            literal (:obj:`str`):
                The exact string the special case applies to.
            specs (:obj:`Iterable[TokenSpec]`):
                The attributes of each of the tokens ``literal`` is split
                into, e.g., ``[{"ORTH": "do"}, {"ORTH": "n't", "NORM":
                "not"}]``. The ``ORTH`` values must add up to ``literal``.

        Raises:
            :obj:`ConfigurationError`: If the special case is malformed.
        """
        with self._lock:
            self._special_cases.add(literal, specs)
            self._invalidate_cache()
        if any(char.isspace() for char in literal):
            self.logger.warning(
                'Special case "%s" contains whitespace and will never match.',
                literal
            )

    def tokenize(self, text: str) -> List[Token]:
        """Split a text into tokens.

        Args:
            text (:obj:`str`):
                The text to tokenize.

        Returns:
            :obj:`List[Token]`: The tokens, in order. Their spans point into
            ``text``.

        Raises:
            :obj:`MatcherContractError`: If a matcher breaks its contract.
        """
        tokens: List[Token] = []
        end = 0
        for chunk_match in _CHUNK_RE.finditer(text):
            self._attach_whitespace(tokens, text, end, chunk_match.start())
            start, end = chunk_match.span()
            for offset, length, attrs, _ in self._segment(chunk_match.group()):
                tokens.append(Token(
                    text, start + offset, length,
                    has_space_after=False,
                    attrs=dict(attrs) if attrs else {},
                ))
        self._attach_whitespace(tokens, text, end, len(text))
        return tokens

    def explain(self, text: str) -> List[Tuple[str, str]]:
        """Find out which rule produced each token.

        This is meant for debugging, so the cache is neither read nor
        written.

        Args:
            text (:obj:`str`):
                The text to tokenize.

        Returns:
            :obj:`List[Tuple[str, str]]`: The ``(rule, token text)`` pairs,
            where the rule is one of ``"SPECIAL-<n>"`` (the n-th token of a
            special case), ``"TOKEN_MATCH"``, ``"PREFIX"``, ``"SUFFIX"``,
            ``"URL_MATCH"``, ``"INFIX"`` or ``"TOKEN"``. Whitespace is left
            out.
        """
        explanation = []
        for chunk_match in _CHUNK_RE.finditer(text):
            chunk = chunk_match.group()
            for offset, length, _, rule in self._split_affixes(chunk):
                explanation.append((rule, chunk[offset:offset + length]))
        return explanation

    def cache_info(self) -> CacheInfo:
        """Get the hits, misses and size of the chunk cache."""
        return self._cache.info()

    @property
    def _version(self) -> int:
        # Both counters only ever grow.
        return self._special_cases.version + self._matcher_version

    def _matcher_changed(self):
        self._matcher_version += 1
        self._invalidate_cache()

    def _invalidate_cache(self):
        self._cache.clear()
        self.logger.debug("Tokenization rules changed; chunk cache cleared.")

    def _attach_whitespace(
        self,
        tokens: List[Token],
        text: str,
        start: int,
        end: int,
    ):
        """Account for the whitespace ``text[start:end]``.

        Args:
            tokens (:obj:`List[Token]`):
                The tokens so far. The last one, if any, precedes the
                whitespace.
            text (:obj:`str`):
                The text being tokenized.
            start (:obj:`int`):
                The offset where the whitespace starts.
            end (:obj:`int`):
                The offset where the whitespace ends.
        """
        if start >= end:
            return
        if not self.keep_whitespace:
            if tokens:
                tokens[-1].has_space_after = True
            return
        if tokens and text[start] == " ":
            tokens[-1].has_space_after = True
            start += 1
        if start < end:
            tokens.append(Token(text, start, end - start, has_space_after=False))

    def _segment(self, chunk: str) -> Tuple[Segment, ...]:
        version = self._version
        segments = self._cache.get(version, chunk)
        if segments is None:
            segments = self._split_affixes(chunk)
            self._cache.set(version, chunk, segments)
        return segments

    def _split_affixes(self, chunk: str) -> Tuple[Segment, ...]:
        """Segment a whitespace-free chunk.

        Args:
            chunk (:obj:`str`):
                The chunk to segment.

        Returns:
            :obj:`Tuple[Segment, ...]`: The ``(offset, length, attribute
            overrides, rule)`` of each of the tokens of the chunk, in order.
        """
        segments: List[Segment] = []
        suffixes: List[Tuple[int, int]] = []
        start, end = 0, len(chunk)
        while start < end:
            string = chunk[start:end]
            special = self._special_cases.lookup(string)
            if special is not None:
                for i, (orth, attrs) in enumerate(special, start=1):
                    segments.append((start, len(orth), attrs, f"SPECIAL-{i}"))
                    start += len(orth)
                break
            if self._token_match is not None and self._token_match(string):
                segments.append((start, end - start, None, "TOKEN_MATCH"))
                break
            prefix_length = find_prefix(self._prefix_search, string)
            if prefix_length:
                segments.append((start, prefix_length, None, "PREFIX"))
                start += prefix_length
                continue
            suffix_length = find_suffix(self._suffix_search, string)
            if suffix_length:
                end -= suffix_length
                suffixes.append((end, suffix_length))
                continue
            if self._url_match is not None and self._url_match(string):
                segments.append((start, end - start, None, "URL_MATCH"))
                break
            infixes = find_infixes(self._infix_finditer, string)
            if infixes:
                cursor = 0
                for infix_start, infix_end in infixes:
                    if infix_start > cursor:
                        segments.append(
                            (start + cursor, infix_start - cursor, None, "TOKEN")
                        )
                    segments.append(
                        (start + infix_start, infix_end - infix_start, None, "INFIX")
                    )
                    cursor = infix_end
                if cursor < len(string):
                    segments.append(
                        (start + cursor, len(string) - cursor, None, "TOKEN")
                    )
                break
            segments.append((start, end - start, None, "TOKEN"))
            break
        # The last suffix split off comes first in the text.
        for offset, length in reversed(suffixes):
            segments.append((offset, length, None, "SUFFIX"))
        return tuple(segments)
