"""Text helpers used when rendering schema documents."""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional

from schemadoc.cardinality import Cardinality

__all__ = [
    "nl2br",
    "nl2br_slash",
    "nl2mdnl",
    "nl2space",
    "escape_nl",
    "escape_double_quote",
    "show_only_first_paragraph",
    "label_join",
    "escape_url",
    "escape_mermaid",
    "left_cardinality",
    "right_cardinality",
    "template_funcs",
]

_NEWLINE = re.compile(r"\r\n|\n|\r")
_MERMAID_UNSAFE = re.compile(r"[^a-zA-Z0-9_\-]")
_URL_PIECE = re.compile(r"%[0-9A-Fa-f]{2}|.", re.DOTALL)
_URL_SAFE = frozenset(";/?:@&=+$,-_.!~*'()#")


def _replace_newlines(text: str, replacement: str) -> str:
    return _NEWLINE.sub(replacement, text)


def nl2br(text: str) -> str:
    return _replace_newlines(text, "<br>")


def nl2br_slash(text: str) -> str:
    return _replace_newlines(text, "<br />")


def nl2mdnl(text: str) -> str:
    """Turn newlines into markdown hard line breaks."""
    return _replace_newlines(text, "  \n")


def nl2space(text: str) -> str:
    return _replace_newlines(text, " ")


def escape_nl(text: str) -> str:
    return _replace_newlines(text, "\\n")


def escape_double_quote(text: str) -> str:
    return text.replace('"', "#quot;")


def show_only_first_paragraph(text: str) -> str:
    """The text before the first blank line."""
    for separator in ("\r\n\r\n", "\r\r"):
        if separator in text:
            return text.split(separator, 1)[0]
    return text.split("\n\n", 1)[0]


def label_join(labels: Iterable) -> str:
    """Label names, each in backquotes, separated by spaces."""
    names = [label.name for label in labels]
    if not names:
        return ""
    return "`" + "` `".join(names) + "`"


def _encode_url_piece(match: re.Match) -> str:
    piece = match.group(0)
    if len(piece) == 3:
        return piece
    if piece.isascii() and (piece.isalnum() or piece in _URL_SAFE):
        return piece
    try:
        raw = piece.encode("utf-8")
    except UnicodeEncodeError:
        raw = "\ufffd".encode("utf-8")
    return "".join(f"%{b:02X}" for b in raw)


def escape_url(text: str) -> str:
    """Percent-encode *text* for use in a URL, keeping existing escapes."""
    return _URL_PIECE.sub(_encode_url_piece, text)


def escape_mermaid(text: str) -> str:
    """Replace every character Mermaid cannot take in an identifier with '_'."""
    return _MERMAID_UNSAFE.sub("_", text)


_LEFT = {
    Cardinality.ZERO_OR_ONE: "|o",
    Cardinality.EXACTLY_ONE: "||",
    Cardinality.ZERO_OR_MORE: "}o",
    Cardinality.ONE_OR_MORE: "}|",
}

_RIGHT = {
    Cardinality.ZERO_OR_ONE: "o|",
    Cardinality.EXACTLY_ONE: "||",
    Cardinality.ZERO_OR_MORE: "o{",
    Cardinality.ONE_OR_MORE: "|{",
}


def left_cardinality(cardinality: Cardinality) -> str:
    """Mermaid crow's-foot marker for the left end of a relation."""
    return _LEFT.get(cardinality, "}")


def right_cardinality(cardinality: Cardinality) -> str:
    """Mermaid crow's-foot marker for the right end of a relation."""
    return _RIGHT.get(cardinality, "")


def template_funcs(lookup: Optional[Callable[[str], str]] = None) -> dict[str, Callable]:
    """The helpers available to templates, by name; *lookup* translates words."""
    translate = lookup if lookup is not None else (lambda text: text)
    return {
        "nl2br": nl2br,
        "nl2br_slash": nl2br_slash,
        "nl2mdnl": nl2mdnl,
        "nl2space": nl2space,
        "escape_nl": escape_nl,
        "escape_double_quote": escape_double_quote,
        "show_only_first_paragraph": show_only_first_paragraph,
        "lookup": translate,
        "label_join": label_join,
        "escape": escape_url,
        "escape_mermaid": escape_mermaid,
        "lcardi": left_cardinality,
        "rcardi": right_cardinality,
    }