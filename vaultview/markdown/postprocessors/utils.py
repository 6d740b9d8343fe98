"""Parse-once helpers for the BeautifulSoup postprocessors."""

from __future__ import annotations

from bs4 import BeautifulSoup

_SOUP_KEY = "_soup"
_SOUP_SOURCE_KEY = "_soup_source"


def get_shared_soup(html: str, context: dict) -> BeautifulSoup:
    """Return the soup cached in the context, reparsing if ``html`` moved on."""
    soup = context.get(_SOUP_KEY)
    if soup is None or context.get(_SOUP_SOURCE_KEY) != html:
        soup = BeautifulSoup(html, "html.parser")
        context[_SOUP_KEY] = soup
        context[_SOUP_SOURCE_KEY] = html
    return soup


def soup_to_html(context: dict, soup: BeautifulSoup) -> str:
    """Serialise a modified soup and keep it cached against the new HTML."""
    html = str(soup)
    context[_SOUP_KEY] = soup
    context[_SOUP_SOURCE_KEY] = html
    return html


def clear_shared_soup(context: dict) -> None:
    context.pop(_SOUP_KEY, None)
    context.pop(_SOUP_SOURCE_KEY, None)


def class_list(tag) -> list[str]:
    classes = tag.get("class", [])
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)
