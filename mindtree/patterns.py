"""
Line-level pattern library.

Pure predicates and extractors used by the classifier and every
synthesizer. Each function takes one line (already stripped unless noted)
and returns a boolean, a parsed capture, or None. None of them raise on
arbitrary Unicode input.

Supported markers:
- Markdown headings (``#`` to ``######``)
- Bullets (``- • * + ·``) and ordered items (``1.``, ``2)``, ``3、``)
- Chapters (``第三章 …``, ``Chapter 3``, ``Chapter IV``) and sections (``3.2.1 …``)
- Outline markers (``IV.``, ``B.``, ``c)``, ``1.2.3``)
- Org-mode stars, filesystem-like paths, ``key: value`` pairs
- Inline Markdown links, emphasis and fenced code
"""

from __future__ import annotations

import re

# =============================================================================
# REGULAR EXPRESSIONS
# =============================================================================

CJK_DIGITS = "零〇一二两三四五六七八九"
CJK_UNITS = "十百千万"
CJK_NUMERALS = CJK_DIGITS + CJK_UNITS

HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)(?:\s+#+)?\s*$")
BULLET_RE = re.compile(r"^([-•*+·])\s+(.*\S)")
NUMBERED_RE = re.compile(r"^(\d{1,3})(?:[.)]\s+|、\s*)(.*\S)")
CHAPTER_RE = re.compile(rf"^第\s*([{CJK_NUMERALS}\d]+)\s*章[\s:：.、]*(.*)$")
EN_CHAPTER_RE = re.compile(r"^chapter\s+(\d+|[ivxlcdm]+)\b[\s.:：-]*(.*)$", re.IGNORECASE)
SECTION_RE = re.compile(r"^(\d+(?:\.\d+){1,3})\.?\s+(.*\S)")
ROMAN_MARKER_RE = re.compile(r"^([IVXLCDM]+)[.)]\s+(.*\S)")
UPPER_MARKER_RE = re.compile(r"^([A-Z])[.)]\s+(.*\S)")
LOWER_MARKER_RE = re.compile(r"^([a-z])[.)]\s+(.*\S)")
DOTTED_MARKER_RE = re.compile(r"^(\d+(?:\.\d+){2,})\.?\s+(.*\S)")
ORG_RE = re.compile(r"^(\*+)\s+(.*\S)")
KEY_VALUE_RE = re.compile(r"^[\w\"'][\w\s.\-\"']{0,40}:(?:\s+\S.*)?$")
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
BOLD_RE = re.compile(r"(\*\*|__)(?=\S)(.+?)(?<=\S)\1")
ITALIC_RE = re.compile(r"(?<![*\w])([*_])(?=\S)([^*_]+?)(?<=\S)\1(?![*\w])")
INLINE_CODE_RE = re.compile(r"`([^`]+)`")
FENCE_RE = re.compile(r"^(```|~~~)")
CJK_LEAD_RE = re.compile(rf"^[{CJK_NUMERALS}]+[、.．]")
ORDINAL_LEAD_RE = re.compile(rf"^第\s*[{CJK_NUMERALS}\d]+")
CJK_CHAR_RE = re.compile(r"[一-鿿]")
SENTENCE_SPLIT_RE = re.compile(r"(?<=[。！？!?；;])|(?<=\.)(?=\s)")
SENTENCE_PUNCTUATION = "。，、"
SENTENCE_ENDINGS = ".!?;,。！？；，"
ALL_CAPS_RE = re.compile(r"^[A-Z][A-Z0-9\s&/\-]*[A-Z0-9]$")
TITLE_CASE_RE = re.compile(r"^[A-Z][a-z]+(?:\s+(?:[A-Z][a-z]+|of|and|the|for|to|in|on|a))*\s+[A-Z][a-z]+")

ROMAN_VALUES = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100, "D": 500, "M": 1000}
CJK_VALUES = {
    "零": 0,
    "〇": 0,
    "一": 1,
    "二": 2,
    "两": 2,
    "三": 3,
    "四": 4,
    "五": 5,
    "六": 6,
    "七": 7,
    "八": 8,
    "九": 9,
}
CJK_UNIT_VALUES = {"十": 10, "百": 100, "千": 1000, "万": 10000}


# =============================================================================
# NUMERALS
# =============================================================================


def cjk_to_int(token: str) -> int | None:
    """
    Convert a CJK numeral (``三``, ``十二``, ``一百零五``) to an integer.

    Returns None when the token contains anything other than CJK numerals.
    """
    if not token or any(ch not in CJK_VALUES and ch not in CJK_UNIT_VALUES for ch in token):
        return None

    total = 0
    section = 0
    digit = 0
    for ch in token:
        if ch in CJK_VALUES:
            digit = CJK_VALUES[ch]
            continue
        unit = CJK_UNIT_VALUES[ch]
        if unit == 10000:
            total += (section + digit) * unit
            section = 0
        else:
            # A bare unit ("十") means one of it
            section += (digit or 1) * unit
        digit = 0
    return total + section + digit


def roman_to_int(token: str) -> int | None:
    """Convert a Roman numeral to an integer, or None if it is not one."""
    token = token.upper()
    if not token or any(ch not in ROMAN_VALUES for ch in token):
        return None
    total = 0
    for i, ch in enumerate(token):
        value = ROMAN_VALUES[ch]
        if i + 1 < len(token) and ROMAN_VALUES[token[i + 1]] > value:
            total -= value
        else:
            total += value
    return total if total > 0 else None


def numeral_to_int(token: str) -> int | None:
    """Normalize an Arabic, Roman or CJK numeral to an integer."""
    token = token.strip()
    if token.isdigit():
        try:
            return int(token)
        except ValueError:
            return None
    value = cjk_to_int(token)
    if value is not None:
        return value
    return roman_to_int(token)


# =============================================================================
# LINE PARSERS
# =============================================================================


def parse_heading(line: str) -> tuple[int, str] | None:
    """Return ``(level, title)`` for a Markdown heading line."""
    match = HEADING_RE.match(line)
    if not match or not match.group(2):
        return None
    return len(match.group(1)), match.group(2)


def is_heading(line: str) -> bool:
    return parse_heading(line) is not None


def parse_bullet(line: str) -> str | None:
    """Return the item text of a bullet line."""
    match = BULLET_RE.match(line)
    return match.group(2) if match else None


def is_bullet(line: str) -> bool:
    return BULLET_RE.match(line) is not None


def parse_numbered(line: str) -> tuple[int, str] | None:
    """Return ``(number, text)`` for an ordered-list line such as ``2) Goals``."""
    match = NUMBERED_RE.match(line)
    if not match:
        return None
    return int(match.group(1)), match.group(2)


def is_numbered(line: str) -> bool:
    return NUMBERED_RE.match(line) is not None


def parse_chapter(line: str) -> tuple[int | None, str] | None:
    """
    Return ``(chapter_number, title)`` for a chapter line.

    The number is None when the numeral cannot be normalized; the line
    still counts as a chapter.
    """
    match = CHAPTER_RE.match(line) or EN_CHAPTER_RE.match(line)
    if not match:
        return None
    return numeral_to_int(match.group(1)), match.group(2).strip()


def is_chapter(line: str) -> bool:
    return parse_chapter(line) is not None


def parse_section(line: str) -> tuple[tuple[int, ...], str] | None:
    """Return ``((3, 2, 1), title)`` for a numbered section line ``3.2.1 Title``."""
    match = SECTION_RE.match(line)
    if not match:
        return None
    numbers = tuple(int(part) for part in match.group(1).split("."))
    return numbers, match.group(2)


def is_section(line: str) -> bool:
    return SECTION_RE.match(line) is not None


def parse_outline_marker(line: str) -> tuple[str, int, str] | None:
    """
    Classify an outline marker.

    Returns ``(kind, depth, text)`` where kind is one of ``roman``,
    ``upper``, ``lower`` or ``dotted``. Single letters that are also Roman
    numerals count as Roman only for I, V and X.
    """
    match = DOTTED_MARKER_RE.match(line)
    if match:
        return "dotted", match.group(1).count("."), match.group(2)
    match = ROMAN_MARKER_RE.match(line)
    if match and (len(match.group(1)) > 1 or match.group(1) in "IVX"):
        if roman_to_int(match.group(1)) is not None:
            return "roman", 0, match.group(2)
    match = UPPER_MARKER_RE.match(line)
    if match:
        return "upper", 1, match.group(2)
    match = LOWER_MARKER_RE.match(line)
    if match:
        return "lower", 3, match.group(2)
    return None


def is_outline_marker(line: str) -> bool:
    marker = parse_outline_marker(line)
    return marker is not None


def parse_org(line: str) -> tuple[int, str] | None:
    """Return ``(level, title)`` for an org-mode heading."""
    match = ORG_RE.match(line)
    if not match:
        return None
    return len(match.group(1)), match.group(2)


def is_key_value(line: str) -> bool:
    """True for ``key: value`` and ``key:`` lines (not URLs)."""
    return "://" not in line and KEY_VALUE_RE.match(line) is not None


def split_path(line: str) -> list[str] | None:
    """
    Split a filesystem-like path into segments.

    Returns None unless the line has at least two short segments; prose that
    happens to contain a slash ("and/or") is rejected by the segment limits.
    """
    if "/" not in line or "://" in line:
        return None
    if any(ch in line for ch in SENTENCE_PUNCTUATION):
        return None
    segments = [seg.strip() for seg in line.split("/")]
    segments = [seg for seg in segments if seg]
    if len(segments) < 2:
        return None
    for seg in segments:
        if len(seg) > 40 or len(seg.split()) > 3:
            return None
    return segments


def is_path(line: str) -> bool:
    return split_path(line) is not None


# =============================================================================
# INLINE MARKUP & TEXT HELPERS
# =============================================================================


def has_link(line: str) -> bool:
    return LINK_RE.search(line) is not None


def has_emphasis(line: str) -> bool:
    return BOLD_RE.search(line) is not None or ITALIC_RE.search(line) is not None


def is_fence(line: str) -> bool:
    return FENCE_RE.match(line) is not None


def strip_inline_markup(text: str) -> str:
    """Remove Markdown links, emphasis and inline code, keeping the text."""
    text = LINK_RE.sub(r"\1", text)
    text = BOLD_RE.sub(r"\2", text)
    text = ITALIC_RE.sub(r"\2", text)
    text = INLINE_CODE_RE.sub(r"\1", text)
    return text.strip()


def strip_list_marker(line: str) -> str:
    """Remove a leading bullet or ordered-list marker."""
    bullet = parse_bullet(line)
    if bullet is not None:
        return bullet
    numbered = parse_numbered(line)
    if numbered is not None:
        return numbered[1]
    return line


def indent_width(raw_line: str) -> int:
    """Leading whitespace width of an unstripped line; a tab counts as 4."""
    width = 0
    for ch in raw_line:
        if ch == " ":
            width += 1
        elif ch == "\t":
            width += 4
        elif ch in "　":
            width += 2
        else:
            break
    return width


def split_sentences(text: str) -> list[str]:
    """Split text on terminal punctuation (CJK and Latin)."""
    parts = SENTENCE_SPLIT_RE.split(text)
    return [part.strip() for part in parts if part and part.strip()]


def has_sentence_punctuation(line: str) -> bool:
    """True if the line reads like prose rather than a title."""
    if any(ch in line for ch in SENTENCE_PUNCTUATION):
        return True
    return line.rstrip()[-1:] in SENTENCE_ENDINGS if line.strip() else False


def has_leading_numeral(line: str) -> bool:
    """True for lines starting with ``1.``, ``2)``, ``第三``, ``三、`` or ``Chapter``."""
    return (
        NUMBERED_RE.match(line) is not None
        or ORDINAL_LEAD_RE.match(line) is not None
        or CJK_LEAD_RE.match(line) is not None
        or EN_CHAPTER_RE.match(line) is not None
        or SECTION_RE.match(line) is not None
    )


def is_caps_or_title_case(line: str) -> bool:
    """ALL-CAPS lines or runs of Capitalized Words."""
    return ALL_CAPS_RE.match(line) is not None or TITLE_CASE_RE.match(line) is not None


def contains_cjk(line: str) -> bool:
    return CJK_CHAR_RE.search(line) is not None


def find_keyword(line: str, keywords: tuple[str, ...]) -> str | None:
    """
    Return the first structural keyword contained in ``line``.

    Latin keywords must match on word boundaries ("part" does not match
    "department"); CJK keywords match as substrings.
    """
    lowered = line.lower()
    for keyword in keywords:
        if contains_cjk(keyword):
            if keyword in line:
                return keyword
        elif re.search(rf"\b{re.escape(keyword)}\b", lowered):
            return keyword
    return None
