"""
Renders a human-readable description of a dialect as an HTML fragment,
telling the author which markup is available and how it will be labelled.
"""
from lxml import etree

from ..utils.dialect import Dialect, Feature
from ..utils.structures import PAGE_PROP


def _para(parent: etree._Element, *parts) -> etree._Element:
    """
    Appends a <p> built from text parts. A (tag, text) tuple becomes an
    inline child element, e.g. ('b', 'Sections').
    """
    p = etree.SubElement(parent, 'p')
    last = None
    for part in parts:
        if isinstance(part, tuple):
            last = etree.SubElement(p, part[0])
            last.text = part[1]
        elif last is None:
            p.text = (p.text or '') + part
        else:
            last.tail = (last.tail or '') + part
    return p


def _labelled(prop: str) -> str:
    return f", and will be labelled '{prop}'." if prop else "."


def _simple_prop(parent: etree._Element, name: str, feature: Feature | None, by: str):
    if feature is None:
        _para(parent, ('b', name), " are not marked up.")
        return
    _para(parent, ('b', name), f" will be marked by {by}{_labelled(feature.prop)}")


def _heading(parent: etree._Element, text: str):
    etree.SubElement(parent, 'h3').text = text
    _para(parent, "The following are defined:")


def describe_dialect(dialect: Dialect, title: str = "") -> str:
    """
    Describes every feature of a dialect, in the order the features are
    applied to a paragraph.

    Args:
        dialect: the dialect to describe.
        title: heading of the description; defaults to the dialect name.

    Returns:
        str: an HTML fragment.
    """
    root = etree.Element('div', {'class': 'dialect-info'})
    etree.SubElement(root, 'h2').text = title or dialect.name or "MML dialect"
    if dialect.description:
        _para(root, dialect.description)

    _simple_prop(root, "Sections", dialect.section, "two blank lines")
    _simple_prop(root, "Paragraphs", dialect.paragraph, "one blank line")
    _simple_prop(root, "Quotations", dialect.quotations, "initial '> ', which may be nested")

    if dialect.softhyphens:
        _para(root, ('b', "Hyphens:"),
              " Lines ending in '-' will be joined up, and the hyphen labelled "
              "'soft-hyphen', which will be invisible but still present.")
    else:
        _para(root, ('b', "Hyphens:"), " Lines ending in '-' followed by a new line will ",
              ('em', "not"), " be joined up.")

    if dialect.smartquotes:
        _para(root, "Single and double plain ", ('b', "quotation marks"),
              " will be converted automatically into curly quotes.")
    else:
        _para(root, "Single and double plain ", ('b', "quotation marks"),
              " will be left unchanged.")

    if dialect.codeblocks:
        _heading(root, "Preformatted sections")
        for level, block in enumerate(dialect.codeblocks, start=1):
            _para(root, f"A line starting with {level * 4} spaces or {level} tabs will be "
                        f"treated as preformatted and indented to tab-stop {level}"
                        f"{_labelled(block.prop)}")

    if dialect.headings:
        _heading(root, "Headings")
        for level, heading in enumerate(dialect.headings, start=1):
            _para(root, "Text on a line followed by another line consisting entirely of "
                        f"'{heading.tag}' characters will be displayed as a heading level "
                        f"{level}{_labelled(heading.prop)}")

    if dialect.dividers:
        _heading(root, "Dividers")
        for divider in dialect.dividers:
            _para(root, f"'{divider.tag}' on a line by itself will be drawn in accordance "
                        f"with the stylesheet definition for '{divider.prop}'"
                        f"{_labelled(divider.prop)}")

    if dialect.charformats:
        _heading(root, "Character formats")
        for cfmt in dialect.charformats:
            _para(root, f"Text within a paragraph that begins and ends with '{cfmt.tag}' "
                        "will be drawn in accordance with the stylesheet definition for "
                        f"'{cfmt.prop}'{_labelled(cfmt.prop)}")

    if dialect.paraformats:
        _heading(root, "Paragraph formats")
        for pfmt in dialect.paraformats:
            _para(root, "Text separated by one blank line before and after, with "
                        f"'{pfmt.left_tag}' at the start and '{pfmt.right_tag}' at the end "
                        "will be drawn in accordance with the stylesheet definition for "
                        f"'{pfmt.prop}'{_labelled(pfmt.prop)}")

    if dialect.milestones:
        _heading(root, "Milestones")
        for ms in dialect.milestones:
            text = (f"A line preceded by '{ms.left_tag}' and followed by '{ms.right_tag}' "
                    "will mark an invisible dividing point"
                    f"{_labelled(ms.prop)[:-1]}, and will have the value of its textual content.")
            if ms.prop == PAGE_PROP:
                text += (" The page milestone will be used to align segments of the "
                         "transcription to the preview, and to fetch page images with that name.")
            _para(root, text)

    return etree.tostring(root, method='html', encoding='unicode')
