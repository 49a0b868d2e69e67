class TextSplicer:
    """Position-aware editing of an original text.

    Positions are offsets in the *original* text; the splicer keeps the running
    shift caused by previous edits. Within one pass, calls must be issued in
    non-decreasing position order. Call ``reset`` to start a new pass whose
    positions all precede the edits of the previous passes.
    """

    def __init__(self, text: str) -> None:
        self._buffer = text
        self._delta = 0

    @property
    def text(self) -> str:
        return self._buffer

    def reset(self) -> None:
        self._delta = 0

    def insert(self, text: str, position: int) -> None:
        pos = position + self._delta
        self._buffer = self._buffer[:pos] + text + self._buffer[pos:]
        self._delta += len(text)

    def replace(self, old: str, new: str, position: int) -> None:
        pos = position + self._delta
        self._buffer = self._buffer[:pos] + new + self._buffer[pos + len(old) :]
        self._delta += len(new) - len(old)

    def ends_with_terminator(self, position: int) -> bool:
        return self._buffer[: position + self._delta].rstrip().endswith(";")
