"""Line normalization for raw pasted documents."""


def normalize_lines(text: str) -> list[str]:
    """Split text into trimmed, non-empty lines, preserving order.

    >>> normalize_lines("  Title: Sub  \\n\\n\\tKEYWORDS\\r\\n")
    ['Title: Sub', 'KEYWORDS']
    """
    if not text:
        return []
    return [line.strip() for line in text.split("\n") if line.strip()]
