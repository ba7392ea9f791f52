"""Base tokenizer."""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List, Optional

from spacy.tokens import Doc as SpacyDoc
from spacy.tokens import Token as SpacyToken
from spacy.vocab import Vocab

from .tokens import Token

# Special-case overrides that map onto native spaCy token attributes.
_NATIVE_ATTRS = ("NORM", "LEMMA", "TAG", "POS")


class BaseTokenizer(ABC):
    """Base tokenizer.

    Anything able to turn a text into a list of :obj:`Token` objects can be
    used wherever a tokenizer is expected, including as the ``tokenizer`` of
    a spaCy pipeline: calling the tokenizer produces a spaCy document.
    """

    def __init__(
        self,
        vocab: Optional[Vocab] = None,
        log_level: Optional[int] = None,
    ):
        """Instanciate a tokenizer.

        Args:
            vocab (:obj:`Optional[Vocab]`, defaults to an empty vocabulary):
                The spaCy vocabulary the strings of the produced documents are
                interned in.
            log_level (:obj:`Optional[int]`, defaults to ``logging.INFO``):
                The level of the logger.
        """
        if vocab is None:
            vocab = Vocab()
        if log_level is None:
            log_level = logging.INFO

        # Set up logger.
        logging.basicConfig(
            format="%(levelname)s: %(message)s",
            level=log_level
        )
        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.setLevel(log_level)
        self.vocab = vocab
        # Keep the full special-case attributes around, not only those spaCy
        # tokens have a slot for.
        SpacyToken.set_extension("special_attrs", default=None, force=True)

    @abstractmethod
    def tokenize(self, text: str) -> List[Token]:
        """Split a text into tokens.

        Args:
            text (:obj:`str`):
                The text to tokenize.

        Returns:
            :obj:`List[Token]`: The tokens, in order.
        """
        pass

    def __call__(self, text: str) -> SpacyDoc:
        """Tokenize a text into a spaCy document.

        Args:
            text (:obj:`str`):
                The text to tokenize.

        Returns:
            :obj:`SpacyDoc`: The tokenized document.
        """
        return self._to_doc(self.tokenize(text))

    def pipe(self, texts: Iterable[str], batch_size: int = 1000) -> Iterator[SpacyDoc]:
        """Tokenize a stream of texts.

        Args:
            texts (:obj:`Iterable[str]`):
                The texts to tokenize.
            batch_size (:obj:`int`):
                Unused. Accepted for compatibility with spaCy's tokenizers.

        Yields:
            :obj:`SpacyDoc`: The tokenized documents, in order.
        """
        for text in texts:
            yield self(text)

    def _to_doc(self, tokens: List[Token]) -> SpacyDoc:
        """Build a spaCy document out of tokens.

        Args:
            tokens (:obj:`List[Token]`):
                The tokens of the document.

        Returns:
            :obj:`SpacyDoc`: The document, with the attribute overrides of
            the tokens applied.
        """
        doc = SpacyDoc(
            self.vocab,
            words=[tk.text for tk in tokens],
            spaces=[tk.has_space_after for tk in tokens],
        )
        for tk, spacy_tk in zip(tokens, doc):
            if not tk.attrs:
                continue
            for name in _NATIVE_ATTRS:
                if name in tk.attrs:
                    setattr(spacy_tk, f"{name.lower()}_", tk.attrs[name])
            spacy_tk._.special_attrs = dict(tk.attrs)
        return doc
