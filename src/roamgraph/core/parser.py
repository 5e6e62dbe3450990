"""Text conventions used inside block strings.

Attributes are written ``key::value``. A value may hold several bracketed
page links (``[[A]] [[B]]``) which count as separate values.
"""

import re

ATTRIBUTE_DELIMITER = "::"

# Pattern for page links: [[Page Name]]
PAGE_LINK_PATTERN = r"\[\[([^\[\]]+)\]\]"

# Pattern for block references: ((uid))
BLOCK_REF_PATTERN = re.compile(r"^\(\((.+)\)\)$")


def attribute_string(name: str, value: str) -> str:
    """Build the canonical ``name::value`` text."""
    return f"{name}{ATTRIBUTE_DELIMITER}{value}"


def defines_attribute(text: str) -> bool:
    return ATTRIBUTE_DELIMITER in text


def attribute_key(text: str) -> str | None:
    """Return the segment before the first delimiter, or None."""
    if not defines_attribute(text):
        return None
    return text.split(ATTRIBUTE_DELIMITER)[0]


def in_place_value(text: str) -> str | None:
    """Return the trimmed segment after the first delimiter, or None.

    Only the segment up to a second delimiter is considered, so
    ``"a::b::c"`` yields ``"b"``.
    """
    parts = text.split(ATTRIBUTE_DELIMITER)
    if len(parts) < 2:
        return None
    return parts[1].strip()


def _bracket_boundaries(value: str) -> list[tuple[int, int]]:
    """Find every ``]`` followed by at most one whitespace and then ``[``.

    Returns ``(end, start)`` pairs: the current piece ends at ``end`` and the
    next one begins at ``start``; anything in between is discarded.
    """
    boundaries = []
    length = len(value)
    for i, char in enumerate(value):
        if char != "]":
            continue
        j = i + 1
        if j < length and value[j].isspace():
            j += 1
        if j < length and value[j] == "[":
            boundaries.append((i + 1, j))
    return boundaries


def split_bracketed_values(value: str) -> list[str]:
    """Split ``"[[A]] [[B]]"`` into ``["[[A]]", "[[B]]"]``.

    Equivalent to splitting on ``(?<=])\\s?(?=\\[)``, done in two scans so the
    result does not depend on lookbehind support. Empty pieces are kept;
    callers filter them.
    """
    pieces = []
    start = 0
    for end, next_start in _bracket_boundaries(value):
        pieces.append(value[start:end])
        start = next_start
    pieces.append(value[start:])
    return pieces


def split_values(value: str, split_regex: "str | re.Pattern[str] | None" = None) -> list[str]:
    """Split an in-place attribute value and drop empty pieces."""
    if split_regex is None:
        pieces = split_bracketed_values(value)
    else:
        pieces = re.split(split_regex, value)
    return [piece for piece in pieces if piece]


def strip_block_ref(uid: str) -> str:
    """Turn ``((uid))`` into ``uid``; other strings pass through trimmed."""
    uid = uid.strip()
    match = BLOCK_REF_PATTERN.match(uid)
    return match.group(1) if match else uid


def extract_page_links(content: str) -> list[str]:
    """Extract the titles of all ``[[...]]`` page links in content."""
    matches = re.findall(PAGE_LINK_PATTERN, content)
    return [m.strip() for m in matches]
