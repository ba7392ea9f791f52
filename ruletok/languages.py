"""Languages whose tokenization rules can be loaded."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import spacy.lang
from spacy.util import get_lang_class


class Language:
    """Languages with tokenization rules available.

    The rules are spaCy's language data, so the values correspond to the
    ISO 639-1 language codes of the packages under :mod:`spacy.lang`. See
    `https://spacy.io/usage/models#languages`__.
    """

    _languages: List[str] = sorted(
        f.name for f in Path(spacy.lang.__file__).parent.iterdir() if f.is_dir()
        if not f.name.startswith("__")
    )

    @classmethod
    def is_supported(cls, lang: str) -> bool:
        """Determine whether a string represents a supported language.

        Args:
            lang (:obj:`str`):
                The language to check support for.

        Returns:
            :obj:`bool`: Whether the string represents a supported language or
            not.
        """
        return lang in cls._languages

    @classmethod
    def get_supported(cls) -> List[str]:
        """Get languages with tokenization rules.

        Returns:
            :obj:`List[str]`: All the currently supported languages.
        """
        return cls._languages


@dataclass
class TokenizerRules:
    """Tokenization rules of a language.

    Attributes:
        prefixes (:obj:`Sequence[str]`):
            Regex fragments of the prefixes.
        suffixes (:obj:`Sequence[str]`):
            Regex fragments of the suffixes.
        infixes (:obj:`Sequence[str]`):
            Regex fragments of the infixes.
        exceptions (:obj:`Dict[str, List[Dict[Any, Any]]]`):
            The special cases (e.g., contractions or abbreviations).
        token_match (:obj:`Optional[Callable]`):
            Matches strings that must never be split.
        url_match (:obj:`Optional[Callable]`):
            Matches URLs, which are only split off their prefixes and
            suffixes.
    """

    prefixes: Sequence[str] = field(default_factory=list)
    suffixes: Sequence[str] = field(default_factory=list)
    infixes: Sequence[str] = field(default_factory=list)
    exceptions: Dict[str, List[Dict[Any, Any]]] = field(default_factory=dict)
    token_match: Optional[Callable] = None
    url_match: Optional[Callable] = None


def load_rules(lang: str) -> TokenizerRules:
    """Load the tokenization rules of a language from spaCy's language data.

    Args:
        lang (:obj:`str`):
            The ISO 639-1 code of the language.

    Returns:
        :obj:`TokenizerRules`: The rules of the language.

    Raises:
        :obj:`ValueError`: If the language is not supported.
    """
    if not Language.is_supported(lang):
        raise ValueError(
            f'The language "{lang}" is currently not supported.\n'
            f"Valid values are {Language.get_supported()}"
        )
    defaults = get_lang_class(lang).Defaults
    return TokenizerRules(
        prefixes=list(defaults.prefixes or []),
        suffixes=list(defaults.suffixes or []),
        infixes=list(defaults.infixes or []),
        exceptions=dict(defaults.tokenizer_exceptions or {}),
        token_match=defaults.token_match,
        url_match=defaults.url_match,
    )
