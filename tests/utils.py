"""Test utilities."""

from typing import List

from ruletok import Token, Tokenizer
from ruletok.matchers import compile_prefix_search, compile_suffix_search

PREFIXES = [r"\(", '"', r"\.\.\."]
SUFFIXES = [r"\)", '"', r"\.\.\.", r"\?", "!", r"\."]
GIMME = {"gimme": [{"ORTH": "gim"}, {"ORTH": "me", "NORM": "me"}]}


def set_up_gimme_tokenizer(**kwargs) -> Tokenizer:
    """Instanciate a tokenizer with brackets, quotes and some punctuation as
    affixes, and "gimme" as the only special case.

    Args:
        kwargs:
            Any other parameters to pass to the tokenizer.
    """
    options = {
        "rules": GIMME,
        "prefix_search": compile_prefix_search(PREFIXES),
        "suffix_search": compile_suffix_search(SUFFIXES),
    }
    options.update(kwargs)
    return Tokenizer(**options)


def set_up_language_tokenizer(request) -> Tokenizer:
    """Instanciate the language tokenizer to be tested.

    Args:
        request (:obj:`pytest.FixtureRequest`):
            The request of the fixture, holding the command line options.
    """
    return Tokenizer.from_language(
        request.config.getoption("language"),
        keep_whitespace=request.config.getoption("keep_whitespace"),
    )


def texts(tokens: List[Token]) -> List[str]:
    return [tk.text for tk in tokens]


def collapse_whitespace(text: str) -> str:
    """Reduce every whitespace run to a single space, dropping leading
    whitespace."""
    collapsed = " ".join(text.split())
    if collapsed and text[-1].isspace():
        collapsed += " "
    return collapsed
