"""
Unit tests for operation wildcard matching.
"""

import pytest

from rail_hrbac.rbac.wildcard import has_wildcard, wildcard_matcher

pytestmark = pytest.mark.unit


def test_has_wildcard():
    assert has_wildcard("article:*") is True
    assert has_wildcard("*") is True
    assert has_wildcard("article:read") is False


@pytest.mark.parametrize("operation", ["x:", "x:y", "x:y:z"])
def test_namespace_pattern_matches_operations_under_prefix(operation):
    assert wildcard_matcher("x:*")(operation) is True


@pytest.mark.parametrize("operation", ["zx:y", "x", "", "X:y"])
def test_namespace_pattern_is_anchored_at_start(operation):
    assert wildcard_matcher("x:*")(operation) is False


def test_bare_wildcard_matches_everything():
    match = wildcard_matcher("*")
    assert match("") is True
    assert match("anything:at:all") is True


def test_inner_wildcard_accepts_any_suffix_after_last_fragment():
    match = wildcard_matcher("a*c")
    assert match("ac") is True
    assert match("abc") is True
    assert match("abcd") is True
    assert match("abd") is False
    assert match("bac") is False


def test_fragments_must_appear_in_order():
    match = wildcard_matcher("doc:*:read*")
    assert match("doc:1:read") is True
    assert match("doc:1:2:readme") is True
    assert match("doc:read:") is False


def test_fragments_are_literal_text():
    match = wildcard_matcher("user.*")
    assert match("user.read") is True
    assert match("userXread") is False


def test_non_string_operation_does_not_match():
    assert wildcard_matcher("*")(None) is False
