"""Tests for the rule-based tokenizer."""

import re
from concurrent.futures import ThreadPoolExecutor

import pytest
from ruletok import ConfigurationError, Tokenizer, detokenize
from ruletok.matchers import compile_infix_finditer
from spacy.attrs import NORM, ORTH
from .data import gimme, reconstruction
from .utils import collapse_whitespace, set_up_gimme_tokenizer, texts


@pytest.mark.parametrize("text, expected", gimme)
def test_gimme(
    gimme_tokenizer: Tokenizer,  # pylint: disable=redefined-outer-name
    text: str,
    expected: list
):
    assert texts(gimme_tokenizer.tokenize(text)) == expected


@pytest.mark.parametrize("text", reconstruction)
def test_reconstruction(gimme_tokenizer: Tokenizer, text: str):
    tokens = gimme_tokenizer.tokenize(text)
    assert detokenize(tokens) == collapse_whitespace(text)


@pytest.mark.parametrize("text", reconstruction)
def test_reconstruction_keep_whitespace(text: str):
    tokenizer = set_up_gimme_tokenizer(keep_whitespace=True)
    assert detokenize(tokenizer.tokenize(text)) == text


def test_keep_whitespace_tokens():
    tokenizer = set_up_gimme_tokenizer(keep_whitespace=True)
    tokens = tokenizer.tokenize(" a  b\tc")
    assert texts(tokens) == [" ", "a", " ", "b", "\t", "c"]
    assert [tk.has_space_after for tk in tokens] == [
        False, True, False, False, False, False
    ]


def test_spans_point_into_text(gimme_tokenizer: Tokenizer):
    text = "  (gimme!)"
    tokens = gimme_tokenizer.tokenize(text)
    assert [(tk.start, tk.end) for tk in tokens] == [
        (2, 3), (3, 6), (6, 8), (8, 9), (9, 10)
    ]
    assert all(tk.source is text for tk in tokens)


def test_space_flags(gimme_tokenizer: Tokenizer):
    tokens = gimme_tokenizer.tokenize("gimme! (gimme)")
    assert [tk.has_space_after for tk in tokens] == [
        False, False, True, False, False, False, False
    ]
    assert gimme_tokenizer.tokenize("gimme ")[-1].has_space_after
    assert not gimme_tokenizer.tokenize("gimme")[-1].has_space_after


def test_special_case_priority(gimme_tokenizer: Tokenizer):
    assert texts(gimme_tokenizer.tokenize("...gimme")) == ["...", "gim", "me"]
    gimme_tokenizer.add_special_case("...gimme", [{"ORTH": "...gim"}, {"ORTH": "me"}])
    assert texts(gimme_tokenizer.tokenize("...gimme")) == ["...gim", "me"]
    assert texts(gimme_tokenizer.tokenize("(...gimme")) == ["(", "...gim", "me"]
    # The prefix is split off before the suffix is looked at.
    assert texts(gimme_tokenizer.tokenize("(...gimme)")) == ["(", "...", "gim", "me", ")"]


def test_special_case_overwrite(gimme_tokenizer: Tokenizer):
    gimme_tokenizer.add_special_case("gimme", [{"ORTH": "g"}, {"ORTH": "imme"}])
    assert texts(gimme_tokenizer.tokenize("gimme")) == ["g", "imme"]
    assert len(gimme_tokenizer.rules) == 1


def test_special_case_attrs(gimme_tokenizer: Tokenizer):
    gimme_tokenizer.add_special_case(
        "dunno", [{ORTH: "du", NORM: "do"}, {"orth": "n", "norm": "not"}, {"ORTH": "no"}]
    )
    tokens = gimme_tokenizer.tokenize("dunno")
    assert texts(tokens) == ["du", "n", "no"]
    assert [tk.attrs for tk in tokens] == [{"NORM": "do"}, {"NORM": "not"}, {}]


def test_special_case_attrs_are_copied(gimme_tokenizer: Tokenizer):
    tokens = gimme_tokenizer.tokenize("gimme")
    tokens[1].attrs["NORM"] = "changed"
    assert gimme_tokenizer.tokenize("gimme")[1].attrs == {"NORM": "me"}
    assert gimme_tokenizer.rules["gimme"][1] == {"ORTH": "me", "NORM": "me"}


@pytest.mark.parametrize("literal, specs", [
    ("", [{"ORTH": ""}]),
    ("gimme", []),
    ("gimme", [{"NORM": "gimme"}]),
    ("gimme", [{"ORTH": "gim"}]),
    ("gimme", [{"ORTH": "give"}, {"ORTH": "me"}]),
    ("gimme", [{"ORTH": "gimme", 10 ** 9: "x"}]),
])
def test_malformed_special_case(gimme_tokenizer: Tokenizer, literal: str, specs: list):
    with pytest.raises(ConfigurationError):
        gimme_tokenizer.add_special_case(literal, specs)
    assert texts(gimme_tokenizer.tokenize("gimme")) == ["gim", "me"]


def test_malformed_rules_at_construction():
    with pytest.raises(ConfigurationError):
        set_up_gimme_tokenizer(rules={"gimme": []})


def test_cache_hit_skips_matchers():
    calls = []
    prefix_re = re.compile(r"^\(")
    suffix_re = re.compile(r"(?:\)|!)$")

    def prefix_search(string):
        calls.append(string)
        return prefix_re.search(string)

    def suffix_search(string):
        calls.append(string)
        return suffix_re.search(string)

    tokenizer = Tokenizer(prefix_search=prefix_search, suffix_search=suffix_search)
    first = tokenizer.tokenize("(hello)!")
    assert calls
    n_calls = len(calls)
    second = tokenizer.tokenize("(hello)!")
    assert len(calls) == n_calls
    assert first == second
    assert texts(second) == ["(", "hello", ")", "!"]


def test_cache_info(gimme_tokenizer: Tokenizer):
    gimme_tokenizer.tokenize("gimme! gimme!")
    info = gimme_tokenizer.cache_info()
    assert (info.hits, info.misses, info.size) == (1, 1, 1)


def test_add_special_case_invalidates_cache(gimme_tokenizer: Tokenizer):
    assert texts(gimme_tokenizer.tokenize("(dunno)")) == ["(", "dunno", ")"]
    gimme_tokenizer.add_special_case("dunno", [{"ORTH": "dun"}, {"ORTH": "no"}])
    assert gimme_tokenizer.cache_info().size == 0
    assert texts(gimme_tokenizer.tokenize("(dunno)")) == ["(", "dun", "no", ")"]


def test_rules_setter(gimme_tokenizer: Tokenizer):
    gimme_tokenizer.tokenize("gimme")
    gimme_tokenizer.rules = {"dunno": [{"ORTH": "dun"}, {"ORTH": "no"}]}
    assert texts(gimme_tokenizer.tokenize("gimme dunno")) == ["gimme", "dun", "no"]


def test_matcher_setter_invalidates_cache(gimme_tokenizer: Tokenizer):
    assert texts(gimme_tokenizer.tokenize("a-b")) == ["a-b"]
    gimme_tokenizer.infix_finditer = compile_infix_finditer(["-"])
    assert texts(gimme_tokenizer.tokenize("a-b")) == ["a", "-", "b"]


def test_infixes():
    tokenizer = set_up_gimme_tokenizer(infix_finditer=compile_infix_finditer(["-", "~"]))
    assert texts(tokenizer.tokenize("a-b~c")) == ["a", "-", "b", "~", "c"]
    assert texts(tokenizer.tokenize("-a-")) == ["-", "a", "-"]
    assert texts(tokenizer.tokenize("a--b")) == ["a", "-", "-", "b"]
    assert texts(tokenizer.tokenize("(a-b)!")) == ["(", "a", "-", "b", ")", "!"]
    # Infix pieces are not looked up as special cases.
    assert texts(tokenizer.tokenize("gimme-gimme")) == ["gimme", "-", "gimme"]


def test_token_match():
    tokenizer = set_up_gimme_tokenizer(token_match=re.compile(r"^\(\w+\)$").match)
    assert texts(tokenizer.tokenize("(abc)")) == ["(abc)"]
    assert texts(tokenizer.tokenize("((abc)")) == ["(", "(abc)"]


def test_url_match():
    tokenizer = set_up_gimme_tokenizer(
        infix_finditer=compile_infix_finditer([r"\."]),
        url_match=re.compile(r"^\w+\.com$").match,
    )
    assert texts(tokenizer.tokenize("(example.com)!")) == ["(", "example.com", ")", "!"]
    assert texts(tokenizer.tokenize("example.org")) == ["example", ".", "org"]


def test_prefix_before_suffix(gimme_tokenizer: Tokenizer):
    assert gimme_tokenizer.explain('"') == [("PREFIX", '"')]


def test_explain(gimme_tokenizer: Tokenizer):
    assert gimme_tokenizer.explain('"gimme!" hi') == [
        ("PREFIX", '"'),
        ("SPECIAL-1", "gim"),
        ("SPECIAL-2", "me"),
        ("SUFFIX", "!"),
        ("SUFFIX", '"'),
        ("TOKEN", "hi"),
    ]
    assert gimme_tokenizer.cache_info().size == 0


def test_shared_between_threads(gimme_tokenizer: Tokenizer):
    text_list = [text for text, _ in gimme] * 20
    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(
            lambda text: texts(gimme_tokenizer.tokenize(text)), text_list
        ))
    assert results == [expected for _, expected in gimme] * 20
