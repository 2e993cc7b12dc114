"""Strip presentational attributes from rich-text HTML fragments.

Editors paste HTML full of inline styling that the LMS either ignores or
renders badly. Only attributes are removed; tag names, text and nesting are
left alone.
"""

import re

STRIPPED_ATTRIBUTES = frozenset(
    {
        "style",
        "class",
        "id",
        "dir",
        "lang",
        "xml:lang",
        # legacy font attributes
        "face",
        "color",
        "size",
        # legacy table attributes
        "align",
        "valign",
        "bgcolor",
        "background",
        "border",
        "cellpadding",
        "cellspacing",
        "width",
        "height",
    }
)

# Opening tag: name, then the raw attribute text. Quoted values may contain '>'.
_TAG_PATTERN = re.compile(r"""<([a-zA-Z][\w:.-]*)((?:"[^"]*"|'[^']*'|[^'">])*)>""")

_ATTRIBUTE_PATTERN = re.compile(
    r"""(\s+)([^\s"'>/=]+)(\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'>]+))?"""
)


def _strip_attribute(match: re.Match) -> str:
    if match.group(2).lower() in STRIPPED_ATTRIBUTES:
        return ""
    return match.group(0)


def _clean_tag(match: re.Match) -> str:
    name, attributes = match.group(1), match.group(2)
    if not attributes:
        return match.group(0)

    cleaned = _ATTRIBUTE_PATTERN.sub(_strip_attribute, attributes)
    if not cleaned.strip():
        cleaned = ""
    elif cleaned != attributes:
        cleaned = cleaned.rstrip()
    return f"<{name}{cleaned}>"


def clean_html(html: str) -> str:
    """Remove denylisted attributes from every tag and trim the fragment.

    Args:
        html: HTML fragment, possibly empty.

    Returns:
        The fragment without style/class/id/dir/lang and legacy font/table
        attributes.
    """
    if not html:
        return ""
    return _TAG_PATTERN.sub(_clean_tag, html).strip()
