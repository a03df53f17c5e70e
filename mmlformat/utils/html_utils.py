import re
from html import escape
from typing import NamedTuple

from lxml import etree
from lxml import html as lxml_html

# Closing tags and line breaks that earlier lines left in front of a line
_LEADING_CLOSES = re.compile(r'(?:</\w+>|\n)*')
_CLOSE_TAG = re.compile(r'</\w+>')


class Tag(NamedTuple):
    """Structure to represent an HTML tag with attributes."""
    name: str
    attrib: dict | None = None

    def open(self) -> str:
        """Returns the opening tag as markup, e.g. <span class="x">."""
        attrs = "".join(
            f' {k}="{escape(v, quote=True)}"' for k, v in (self.attrib or {}).items()
        )
        return f"<{self.name}{attrs}>"

    def close(self) -> str:
        return f"</{self.name}>"

    def create(self) -> etree._Element:
        """Creates an lxml Element with the specified tag and attributes."""
        return etree.Element(self.name, self.attrib)


def prop_attrib(prop: str | None, titled: bool = True) -> dict[str, str]:
    """
    Returns the attributes used to label an element with a dialect property.
    An empty or missing property yields no attributes.
    """
    if not prop:
        return {}
    if titled:
        return {'class': prop, 'title': prop}
    return {'class': prop}


def leading_closes(markup: str) -> tuple[int, int]:
    """
    Measures the run of closing tags and line breaks at the start of a
    line's rendered markup.

    Returns:
        tuple[int, int]: (end of the last closing tag in the run, end of the
        run). Both are 0 when the markup starts with anything else.
    """
    run = _LEADING_CLOSES.match(markup).end()
    last = 0
    for m in _CLOSE_TAG.finditer(markup, 0, run):
        last = m.end()
    return last, run


def check_well_formed(fragment: str) -> str | None:
    """
    Parses an HTML fragment as XML.

    Returns:
        str | None: the parser's error message, or None if the fragment
        is well-formed.
    """
    parser = etree.XMLParser(recover=False, resolve_entities=False)
    try:
        etree.fromstring(f"<root>{fragment}</root>", parser)
    except etree.XMLSyntaxError as e:
        return str(e)
    return None


def wrap_document(fragment: str, title: str = "", stylesheet: str | None = None,
                  css_text: str | None = None) -> str:
    """
    Wraps a converted fragment into a standalone HTML document.
    A linked stylesheet takes precedence over embedded css_text.
    """
    root = etree.Element('html')
    head = etree.SubElement(root, 'head')
    etree.SubElement(head, 'meta', {'charset': 'utf-8'})
    etree.SubElement(head, 'title').text = title
    if stylesheet:
        etree.SubElement(head, 'link', {'rel': 'stylesheet', 'href': stylesheet})
    elif css_text:
        etree.SubElement(head, 'style').text = css_text
    body = etree.SubElement(root, 'body')

    parts = lxml_html.fragments_fromstring(fragment) if fragment.strip() else []
    # A leading text run comes back as a plain string
    if parts and isinstance(parts[0], str):
        body.text = parts.pop(0)
    for part in parts:
        body.append(part)

    return etree.tostring(root, method='html', encoding='unicode', doctype='<!DOCTYPE html>')
