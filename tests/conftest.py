"""Set up tests."""

import pytest

from .utils import set_up_gimme_tokenizer, set_up_language_tokenizer


def pytest_addoption(parser):
    parser.addoption("--language", action="store", default="en",
                     help="language whose rules to test")
    parser.addoption("--keep-whitespace", action="store_true",
                     help="preserve whitespace in the language tokenizer")


@pytest.fixture
def gimme_tokenizer():
    return set_up_gimme_tokenizer()


@pytest.fixture(scope="session")
def language_tokenizer(request):
    return set_up_language_tokenizer(request)
