"""Split a template string into literal text and placeholder tokens.

Two marker forms are recognised:

* ``$NAME`` -- optional placeholder, substitutes ``""`` when unresolved.
* ``!$NAME`` -- required placeholder, resolution fails when unresolved.

``NAME`` is one or more identifier characters (ASCII letters, digits and
underscore).  A ``$`` that is not followed by an identifier character and a
``!`` that does not introduce a placeholder are kept as literal text, so
``"price: $5"`` scans to a placeholder named ``5`` while ``"100$"`` and
``"Hi!"`` are plain text.

The scan is a single left-to-right pass; markers never overlap.
"""

from __future__ import annotations

import string

from apicall.models import Placeholder, TextSegment, Token

IDENTIFIER_CHARS = frozenset(string.ascii_letters + string.digits + "_")


def scan(template: str) -> list[Token]:
    """Tokenise *template* into :class:`TextSegment` and :class:`Placeholder` items.

    Adjacent literal characters are merged into one segment.  Empty
    templates produce an empty list.

    Args:
        template: The raw template text.

    Returns:
        Tokens in template order.  Joining each segment's ``text`` and each
        placeholder's ``marker`` reproduces *template* exactly.
    """
    tokens: list[Token] = []
    literal: list[str] = []
    i = 0
    length = len(template)

    while i < length:
        required = template.startswith("!$", i)
        start = i + 2 if required else i + 1
        if required or template[i] == "$":
            end = start
            while end < length and template[end] in IDENTIFIER_CHARS:
                end += 1
            if end > start:
                if literal:
                    tokens.append(TextSegment(text="".join(literal)))
                    literal = []
                tokens.append(
                    Placeholder(
                        name=template[start:end],
                        required=required,
                        marker=template[i:end],
                    )
                )
                i = end
                continue
        literal.append(template[i])
        i += 1

    if literal:
        tokens.append(TextSegment(text="".join(literal)))
    return tokens


def placeholders(template: str) -> list[Placeholder]:
    """Return the placeholders of *template* in order of appearance."""
    return [t for t in scan(template) if isinstance(t, Placeholder)]


def template_variables(template: str) -> list[str]:
    """Return the distinct variable names referenced by *template*, in order."""
    seen: dict[str, None] = {}
    for p in placeholders(template):
        seen.setdefault(p.name, None)
    return list(seen)


def required_variables(template: str) -> list[str]:
    """Return the distinct names referenced as ``!$NAME`` in *template*."""
    seen: dict[str, None] = {}
    for p in placeholders(template):
        if p.required:
            seen.setdefault(p.name, None)
    return list(seen)
