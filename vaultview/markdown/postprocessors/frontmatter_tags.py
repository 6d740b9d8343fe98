# vaultview/markdown/postprocessors/frontmatter_tags.py
"""
Postprocessor that shows the note's front matter tags above the content.

Front matter:
    tags: [travel, "#hokkaido"]

Output (prepended):
    <div class="frontmatter-tags">
        <span class="tags-label">Tags:</span>
        <a class="tag frontmatter-tag" href="#tag:travel" data-tag="travel">#travel</a>
        <a class="tag frontmatter-tag" href="#tag:hokkaido" data-tag="hokkaido">#hokkaido</a>
    </div>
"""

from urllib.parse import quote

from .utils import get_shared_soup, soup_to_html


def front_matter_tags(front_matter: dict) -> list[str]:
    """Normalise the ``tags`` field: a list or a comma/space separated string."""
    raw = front_matter.get("tags") or front_matter.get("tag") or []
    if isinstance(raw, str):
        raw = raw.replace(",", " ").split()
    elif not isinstance(raw, (list, tuple)):
        raw = [raw]

    tags: list[str] = []
    for value in raw:
        name = str(value).strip().lstrip("#")
        if name and name not in tags:
            tags.append(name)
    return tags


def frontmatter_tags(html: str, context: dict, tag_prefix: str = "#tag:") -> str:
    tags = front_matter_tags(context.get("front_matter") or {})
    if not tags:
        return html

    soup = get_shared_soup(html, context)
    container = soup.new_tag("div")
    container["class"] = ["frontmatter-tags"]

    label = soup.new_tag("span")
    label["class"] = ["tags-label"]
    label.string = "Tags:"
    container.append(label)

    for name in tags:
        badge = soup.new_tag("a", href=tag_prefix + quote(name, safe="/"))
        badge["class"] = ["tag", "frontmatter-tag"]
        badge["data-tag"] = name
        badge.string = f"#{name}"
        container.append(badge)

    soup.insert(0, container)
    return soup_to_html(context, soup)


def frontmatter_tags_default(html: str, context: dict) -> str:
    """
    Default configuration for frontmatter_tags.

    This is the function that should be registered in POSTPROCESSORS.
    """
    options = context.get("options")
    if options is None:
        return frontmatter_tags(html, context)
    if not options.frontmatter_tags:
        return html
    return frontmatter_tags(html, context, tag_prefix=options.tag_prefix)
