from urllib.parse import urlparse

from .utils import class_list, get_shared_soup, soup_to_html


def is_external_link(href: str, site_hosts=()) -> bool:
    """http(s) and protocol-relative links that leave the site."""
    if href.startswith("//"):
        href = "https:" + href
    parsed = urlparse(href)
    if parsed.scheme not in ("http", "https"):
        return False
    return parsed.hostname not in set(site_hosts)


def modify_external_links(html, context):
    """
    Add target="_blank" and rel="noopener noreferrer" to external links
    This runs AFTER markdown conversion
    """
    if "<a " not in html:
        return html

    options = context.get("options")
    if options is not None and not options.mark_external_links:
        return html
    site_hosts = options.site_hosts if options is not None else ()

    soup = get_shared_soup(html, context)
    external = [
        link for link in soup.find_all("a", href=True) if is_external_link(link["href"], site_hosts)
    ]
    if not external:
        return html

    for link in external:
        link["target"] = "_blank"
        link["rel"] = "noopener noreferrer"
        classes = class_list(link)
        if "external-link" not in classes:
            link["class"] = classes + ["external-link"]

    return soup_to_html(context, soup)
