"""Splitting raw Fountain text into lines."""


def split_lines(text: str | None) -> list[str]:
    """Split *text* into raw lines.

    Windows (``\\r\\n``) and old Mac (``\\r``) line breaks are normalised to
    ``\\n``.  A single trailing newline does not add an empty last line, so
    ``"A\\nB\\n"`` and ``"A\\nB"`` both give ``["A", "B"]``.  Unlike
    ``str.splitlines`` no other separators (form feed, U+2028, ...) split.
    """
    if not text:
        return []
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = normalized.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def line_offsets(lines: list[str]) -> list[int]:
    """Return the absolute character offset at which each line starts."""
    offsets: list[int] = []
    position = 0
    for line in lines:
        offsets.append(position)
        position += len(line) + 1  # newline
    return offsets
