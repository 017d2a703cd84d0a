"""Screenplay line-type classification for stripped (range-free) lines.

``classify_line`` looks at a single line only.  ``apply_block_context``
then applies the neighbour rules of Fountain: title page blocks, the empty
line required before headings, transitions and character cues, and the
dialogue block that follows a character cue.

Examples::

    INT. OFFICE - DAY     -> HEADING
    CUT TO:               -> TRANSITION
    BOB (V.O.)            -> CHARACTER
    >THE END<             -> CENTERED
"""

from typing import Sequence

from core.models import ElementType

# Scene heading prefixes; must be followed by ".", " " or "/"
_HEADING_PREFIXES = ("int", "ext", "est", "i/e")
_HEADING_SEPARATORS = (".", " ", "/")

_TITLE_PAGE_KEYS: dict[str, ElementType] = {
    "title": ElementType.TITLE_PAGE_TITLE,
    "author": ElementType.TITLE_PAGE_AUTHOR,
    "authors": ElementType.TITLE_PAGE_AUTHOR,
    "credit": ElementType.TITLE_PAGE_CREDIT,
    "source": ElementType.TITLE_PAGE_SOURCE,
    "contact": ElementType.TITLE_PAGE_CONTACT,
    "contacts": ElementType.TITLE_PAGE_CONTACT,
    "contact info": ElementType.TITLE_PAGE_CONTACT,
    "draft date": ElementType.TITLE_PAGE_DRAFT_DATE,
    "draft": ElementType.TITLE_PAGE_DRAFT_DATE,
}

_CUES = (ElementType.CHARACTER, ElementType.DUAL_DIALOGUE_CHARACTER)


def _only_uppercase_until_parenthesis(text: str) -> bool:
    head = text.split("(", 1)[0]
    return bool(head) and head == head.upper() and any(ch.isalpha() for ch in head)


def _forced_type(text: str) -> ElementType | None:
    if not text:
        return None
    first, last = text[0], text[-1]

    if first == "!":
        return ElementType.SHOT if text.startswith("!!") else ElementType.ACTION
    if first == ".":
        # ".44" style dialogue is not a heading, neither is an ellipsis
        if len(text) > 1 and text[1] not in ". " and not text[1].isdigit():
            return ElementType.HEADING
        return None
    if first == ">":
        return ElementType.CENTERED if last == "<" else ElementType.TRANSITION
    if first == "~":
        return ElementType.LYRICS
    if first == "=":
        return ElementType.SYNOPSIS
    if first == "#":
        return ElementType.SECTION
    if first == "@":
        return ElementType.DUAL_DIALOGUE_CHARACTER if last == "^" else ElementType.CHARACTER
    return None


def classify_line(text: str) -> ElementType:
    """Return the ``ElementType`` of a single stripped line.

    Pure and total: every string maps to exactly one type.
    """
    if not text.strip():
        # Two or more spaces force a blank action line
        if len(text) > 1 and text.startswith(" ") and text.endswith(" "):
            return ElementType.ACTION
        return ElementType.EMPTY

    stripped = text.strip()
    if len(stripped) >= 3 and set(stripped) == {"="}:
        return ElementType.PAGE_BREAK

    forced = _forced_type(text)
    if forced is not None:
        return forced

    if text[:3].lower() in _HEADING_PREFIXES and text[3:4] in _HEADING_SEPARATORS:
        return ElementType.HEADING

    if len(text) > 2 and text.endswith(":") and text == text.upper():
        return ElementType.TRANSITION

    if _only_uppercase_until_parenthesis(text) and not text.startswith("  "):
        if text.rstrip().endswith("^"):
            return ElementType.DUAL_DIALOGUE_CHARACTER
        return ElementType.CHARACTER

    return ElementType.ACTION


def title_page_key(text: str) -> str:
    """Return the lower-cased title page key of *text*, or ``""``."""
    idx = text.find(":")
    if idx <= 0 or text.startswith(" "):
        return ""
    key = text[:idx].lower()
    if key.endswith(" to"):
        # "SMASH CUT TO:" is a transition
        return ""
    return key


def _title_page_end(kinds: list[ElementType], texts: Sequence[str]) -> int:
    """Re-type the leading title page block in place and return its length."""
    if not texts or not title_page_key(texts[0]):
        return 0
    idx = 0
    while idx < len(texts) and kinds[idx] is not ElementType.EMPTY:
        key = title_page_key(texts[idx])
        if key:
            kinds[idx] = _TITLE_PAGE_KEYS.get(key, ElementType.TITLE_PAGE_UNKNOWN)
        elif texts[idx].startswith(("\t", "   ")) or title_page_key(texts[idx - 1]):
            kinds[idx] = kinds[idx - 1]
        else:
            break
        idx += 1
    return idx


def apply_block_context(
    kinds: Sequence[ElementType], texts: Sequence[str]
) -> list[ElementType]:
    """Re-type per-line results using their neighbours.

    *kinds* and *texts* are parallel and hold only printable lines, in
    document order.
    """
    result = list(kinds)
    start = _title_page_end(result, texts)

    previous_empty = start == 0 or result[start - 1] is ElementType.EMPTY
    dialogue: ElementType | None = None  # cue that opened the current block

    for idx in range(start, len(result)):
        kind = result[idx]
        text = texts[idx]

        if kind is ElementType.EMPTY:
            previous_empty = True
            dialogue = None
            continue

        forced = _forced_type(text) is not None
        if dialogue is not None and not forced:
            parenthetical = text.lstrip().startswith("(")
            if dialogue is ElementType.DUAL_DIALOGUE_CHARACTER:
                result[idx] = (
                    ElementType.DUAL_DIALOGUE_PARENTHETICAL
                    if parenthetical
                    else ElementType.DUAL_DIALOGUE
                )
            else:
                result[idx] = ElementType.PARENTHETICAL if parenthetical else ElementType.DIALOGUE
            previous_empty = False
            continue
        dialogue = None

        if kind in _CUES:
            next_empty = idx + 1 >= len(result) or result[idx + 1] is ElementType.EMPTY
            if next_empty or (not previous_empty and not forced):
                result[idx] = ElementType.ACTION
            else:
                dialogue = kind
        elif kind in (ElementType.HEADING, ElementType.TRANSITION):
            if not previous_empty and not forced:
                result[idx] = ElementType.ACTION

        previous_empty = False

    return result
