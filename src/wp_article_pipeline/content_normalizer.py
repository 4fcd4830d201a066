# -*- coding: utf-8 -*-
"""
Content normalization for model-generated article bodies.

Models return the HTML body with a mix of newline conventions:
- Escaped newlines (a backslash followed by "n") left over from JSON
- Real newline characters
- Doubled <br> tags

This module turns those into <p>/<br> markup. The rules are applied in a
fixed order because later rules consume what earlier rules leave behind.
"""

import re

ESCAPED_PARAGRAPH = "\\n\\n"
ESCAPED_NEWLINE = "\\n"
PARAGRAPH_BREAK = "</p><p>"
LINE_BREAK = "<br>"

EMPTY_PARAGRAPH_RE = re.compile(r"<p></p>")
DOUBLE_BR_RE = re.compile(r"<br>\s*<br>")


def convert_escaped_newlines(text: str) -> str:
    """
    Convert literal backslash-n sequences.

    Args:
        text: Text to convert.

    Returns:
        Text with doubled escapes as paragraph breaks and single ones as <br>.
    """
    result = text.replace(ESCAPED_PARAGRAPH, PARAGRAPH_BREAK)
    return result.replace(ESCAPED_NEWLINE, LINE_BREAK)


def convert_real_newlines(text: str) -> str:
    """
    Convert real newline characters.

    Args:
        text: Text to convert.

    Returns:
        Text with blank lines as paragraph breaks and single newlines as spaces.
    """
    result = text.replace("\n\n", PARAGRAPH_BREAK)
    return result.replace("\n", " ")


def normalize_content(content: str) -> str:
    """
    Normalize an article body into paragraph/line-break HTML.

    Never raises; empty input yields an empty string.

    Args:
        content: Raw content value from the model.

    Returns:
        Normalized HTML.
    """
    if not content:
        return ""

    result = convert_escaped_newlines(content)
    result = convert_real_newlines(result)
    result = EMPTY_PARAGRAPH_RE.sub("", result)
    result = DOUBLE_BR_RE.sub(PARAGRAPH_BREAK, result)

    return result.strip()
