"""Line splitting for page sources."""

from __future__ import annotations


def split_lines(text: str) -> list[str]:
    """Split ``text`` at ``\\n``, ``\\r\\n`` and ``\\r`` only.

    ``str.splitlines`` also breaks at form feeds, ``\\x1c``-``\\x1e``,
    ``\\x85``, ``\\u2028`` and ``\\u2029``. Those stay inside their line here
    so a code sample keeps them as payload. Like ``str.splitlines``, a final
    line break does not produce an extra empty line.

    Example:
        >>> split_lines("a\\x0cb\\r\\nc\\n")
        ['a\\x0cb', 'c']
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines
