"""
Pure helpers over a serialized DOM snapshot.

The browser hands us ``page.content()``; everything from there on is plain
BeautifulSoup work so platform heuristics can be tested against fixture HTML
without a browser.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction

PARSER = "html.parser"

# Elements whose text never renders.
SKIP_TAGS = frozenset({"script", "style", "noscript", "template", "head"})

# Elements that start and end a line when rendered.
BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "dd",
        "details",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "header",
        "hr",
        "li",
        "main",
        "nav",
        "section",
        "summary",
        "tbody",
        "tfoot",
        "thead",
        "tr",
    }
)

# Elements rendered with vertical margins, i.e. separated by a blank line.
PARAGRAPH_TAGS = frozenset({"p", "h1", "h2", "h3", "h4", "h5", "h6", "pre", "blockquote", "ul", "ol", "table"})

# Screen-reader-only labels such as ChatGPT's "You said:" are not part of the message.
HIDDEN_CLASSES = frozenset({"sr-only", "visually-hidden"})

_NON_TEXT = (Comment, CData, Declaration, Doctype, ProcessingInstruction)
_WHITESPACE = re.compile(r"[ \t\r\n\f]+")
_TRAILING_SPACE = re.compile(r"[ \t]+\n")
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")

_Part = Union[int, Tuple[str, bool]]


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, PARSER)


def inner_text(node: Tag) -> str:
    """
    Approximate the browser's ``innerText`` for ``node``.

    Whitespace collapses outside ``<pre>``, block elements break lines,
    paragraph-level elements are separated by a blank line, ``<br>`` breaks
    a line and table cells are tab separated.
    """
    parts: List[_Part] = []
    _collect(node, parts, preformatted=node.name == "pre")
    return _render(parts)


def _is_hidden(node: Tag) -> bool:
    classes = node.get("class") or ()
    if isinstance(classes, str):
        classes = classes.split()
    return any(name in HIDDEN_CLASSES for name in classes)


def _collect(node: Tag, parts: List[_Part], preformatted: bool) -> None:
    for child in node.children:
        if isinstance(child, _NON_TEXT):
            continue
        if isinstance(child, NavigableString):
            text = str(child)
            if not preformatted:
                text = _WHITESPACE.sub(" ", text)
            parts.append((text, preformatted))
            continue
        if not isinstance(child, Tag) or child.name in SKIP_TAGS or _is_hidden(child):
            continue
        if child.name == "br":
            parts.append(("\n", True))
            continue

        breaks = 2 if child.name in PARAGRAPH_TAGS else 1 if child.name in BLOCK_TAGS else 0
        if breaks:
            parts.append(breaks)
        _collect(child, parts, preformatted or child.name == "pre")
        if breaks:
            parts.append(breaks)
        elif child.name in ("td", "th"):
            parts.append(("\t", True))


def _render(parts: Iterable[_Part]) -> str:
    out: List[str] = []
    pending_break = 0
    pending_space = False

    for part in parts:
        if isinstance(part, int):
            pending_break = max(pending_break, part)
            pending_space = False
            continue

        text, preformatted = part
        if not text:
            continue
        if not preformatted and not text.strip():
            if out and not pending_break:
                pending_space = True
            continue

        if pending_break and out:
            out.append("\n" * pending_break)
        at_line_start = not out or out[-1].endswith("\n")
        if not preformatted:
            if at_line_start:
                text = text.lstrip()
            elif pending_space and not out[-1][-1].isspace() and not text[0].isspace():
                text = " " + text
        out.append(text)
        pending_break = 0
        pending_space = False

    rendered = _TRAILING_SPACE.sub("\n", "".join(out))
    return _EXTRA_BLANK_LINES.sub("\n\n", rendered).strip()


def outermost(nodes: Iterable[Tag]) -> List[Tag]:
    """Drop nodes nested inside another node of the same selection, keeping document order."""
    kept: List[Tag] = []
    seen: set[int] = set()
    for node in nodes:
        if any(id(parent) in seen for parent in node.parents):
            continue
        seen.add(id(node))
        kept.append(node)
    return kept


def content_text(node: Tag, markdown_selector: Optional[str]) -> str:
    """Text of the rendered-markdown containers inside ``node``, else of ``node`` itself."""
    if markdown_selector:
        containers = outermost(node.select(markdown_selector))
        if containers:
            return "\n\n".join(text for text in (inner_text(c) for c in containers) if text)
    return inner_text(node)


def find_timestamp(node: Tag) -> Optional[str]:
    stamp = node.select_one("time[datetime]")
    if stamp is None:
        return None
    value = stamp.get("datetime")
    if not isinstance(value, str):
        return None
    return value.strip() or None
