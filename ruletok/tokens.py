"""Token-related utils."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable


@dataclass
class Token:
    """A token, i.e., a span of characters of the original text.

    The token does not hold a copy of its characters: it keeps a reference to
    the string it was produced from together with an offset and a length.

    Attributes:
        source (:obj:`str`):
            The original string the token was taken from.
        start (:obj:`int`):
            The offset of the first character of the token in
            :attr:`source`.
        length (:obj:`int`):
            The number of characters of the token.
        has_space_after (:obj:`bool`):
            Whether the token is followed by a whitespace (this whitespace is
            not part of the :attr:`text`). This information is used for
            detokenization.
        attrs (:obj:`Dict[str, Any]`):
            Attribute overrides (e.g., ``NORM`` or ``LEMMA``) coming from the
            special case that produced the token, if any.
    """

    source: str = field(repr=False)
    start: int
    length: int
    has_space_after: bool = True
    attrs: Dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        """:obj:`str`: The characters that form the token."""
        return self.source[self.start:self.end]

    @property
    def end(self) -> int:
        """:obj:`int`: The offset right after the last character."""
        return self.start + self.length

    def __len__(self) -> int:
        return self.length

    def __str__(self) -> str:
        return self.text


def detokenize(tokens: Iterable[Token]) -> str:
    """Join tokens back into a string.

    Args:
        tokens (:obj:`Iterable[Token]`):
            The tokens to join.

    Returns:
        :obj:`str`: The token texts, each followed by a single space if its
        :attr:`Token.has_space_after` flag is set.
    """
    return "".join([f"{tk.text}{' ' * int(tk.has_space_after)}" for tk in tokens])
