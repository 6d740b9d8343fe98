# vaultview/markdown/postprocessors/table_enhancer.py
"""
Postprocessor that wraps tables in a horizontally scrollable container.

Output:
    <div class="table-container">
        <table>...</table>
    </div>

Tables already inside a .table-container are left as they are.
"""

from bs4 import Tag

from .utils import class_list, get_shared_soup, soup_to_html


def _is_wrapped(table: Tag) -> bool:
    parent = table.parent
    return parent is not None and parent.name == "div" and "table-container" in class_list(parent)


def table_enhancer(html: str, context: dict, container_class: str = "table-container") -> str:
    """
    Wrap every table in a container div.

    Args:
        html: HTML string to process
        context: Rendering context (carries the shared soup)
        container_class: Class given to the wrapper div

    Returns:
        Processed HTML; the input unchanged when there are no tables
    """
    if "<table" not in html:
        return html

    soup = get_shared_soup(html, context)
    tables = [table for table in soup.find_all("table") if not _is_wrapped(table)]
    if not tables:
        return html

    for table in tables:
        wrapper = soup.new_tag("div")
        wrapper["class"] = [container_class]
        table.wrap(wrapper)

    return soup_to_html(context, soup)


def table_enhancer_default(html: str, context: dict) -> str:
    """
    Default configuration for table_enhancer.

    This is the function that should be registered in POSTPROCESSORS.
    """
    options = context.get("options")
    if options is not None and not options.wrap_tables:
        return html
    return table_enhancer(html, context)
