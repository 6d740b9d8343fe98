"""Builders for Pandoc JSON documents, shaped the way Pandoc's reader emits them."""

NO_ATTR = ["", [], []]


def inlines(text):
    items = []
    for line_number, line in enumerate(text.split("\n")):
        if line_number:
            items.append({"t": "SoftBreak"})
        for word_number, word in enumerate(line.split(" ")):
            if word_number:
                items.append({"t": "Space"})
            if word:
                items.append({"t": "Str", "c": word})
    return items


def _inline_run(parts):
    items = []
    for part in parts:
        if isinstance(part, str):
            items.extend(inlines(part))
        else:
            items.append(part)
    return items


def doc(*blocks):
    return {"pandoc-api-version": [1, 23, 1], "meta": {}, "blocks": list(blocks)}


def para(*parts):
    return {"t": "Para", "c": _inline_run(parts)}


def plain(*parts):
    return {"t": "Plain", "c": _inline_run(parts)}


def header(level, *parts):
    return {"t": "Header", "c": [level, list(NO_ATTR), _inline_run(parts)]}


def blockquote(*blocks):
    return {"t": "BlockQuote", "c": list(blocks)}


def bullet_list(*items):
    return {"t": "BulletList", "c": [[plain(item)] for item in items]}


def emph(*parts):
    return {"t": "Emph", "c": _inline_run(parts)}


def strong(*parts):
    return {"t": "Strong", "c": _inline_run(parts)}


def code(text):
    return {"t": "Code", "c": [list(NO_ATTR), text]}


def link(url, *parts):
    return {"t": "Link", "c": [list(NO_ATTR), _inline_run(parts), [url, ""]]}


def line_break():
    return {"t": "LineBreak"}
