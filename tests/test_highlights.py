"""Tests for vaultview/markdown/extensions/highlights.py"""
import pytest
from pandoc_json import doc, link, para

from vaultview.markdown.extensions.highlights import transform_highlights
from vaultview.markdown.tree import Link, Mark, Text, from_pandoc


def _paragraph_nodes(tree):
    (para_id,) = tree[tree.root].children
    return [tree[child] for child in tree[para_id].children]


def test_highlight_wraps_inner_text():
    tree = from_pandoc(doc(para("this is ==very important== stuff")))
    assert transform_highlights(tree) == 1

    before, mark, after = _paragraph_nodes(tree)
    assert before.value == "this is "
    assert after.value == " stuff"
    assert isinstance(mark, Mark)
    assert mark.classes == ["cm-highlight"]
    assert tree[mark.children[0]].value == "very important"


def test_highlight_class_is_configurable():
    tree = from_pandoc(doc(para("==x==")))
    transform_highlights(tree, "hl")
    (mark,) = _paragraph_nodes(tree)
    assert mark.classes == ["hl"]


def test_highlight_inside_link_text():
    tree = from_pandoc(doc(para(link("https://example.com", "==new== site"))))
    assert transform_highlights(tree) == 1
    (anchor,) = _paragraph_nodes(tree)
    assert isinstance(anchor, Link)
    assert isinstance(tree[anchor.children[0]], Mark)


@pytest.mark.parametrize("text", ["a == b", "==unclosed", "====", "x = y = z"])
def test_highlight_needs_closed_pair(text):
    tree = from_pandoc(doc(para(text)))
    assert transform_highlights(tree) == 0
    (node,) = _paragraph_nodes(tree)
    assert isinstance(node, Text)
    assert node.value == text
