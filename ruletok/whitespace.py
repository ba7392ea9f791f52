"""Whitespace tokenizer."""

import re
from typing import List

from .base import BaseTokenizer
from .tokens import Token

_WORD_RE = re.compile(r"\S+")


class WhitespaceTokenizer(BaseTokenizer):
    """Tokenizer for text that is already tokenized.

    Tokens are the maximal runs of non-whitespace characters. Whitespace runs
    are reduced to the :attr:`Token.has_space_after` flag of the preceding
    token.
    """

    def tokenize(self, text: str) -> List[Token]:
        tokens = []
        for match in _WORD_RE.finditer(text):
            start, end = match.span()
            tokens.append(Token(text, start, end - start,
                                has_space_after=end < len(text)))
        return tokens
