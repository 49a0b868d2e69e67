class TraxError(Exception):
    """Fatal error raised while transforming a unit. Never recovered from inside the compiler."""

    def __init__(self, message: str, pos: int | None = None, file_path: str | None = None) -> None:
        self.message = message
        self.pos = pos
        self.file_path = file_path
        super().__init__(str(self))

    def __str__(self) -> str:
        text = f"Trax: {self.message}"
        if self.pos is not None:
            text += f" at pos: {self.pos}"
        if self.file_path:
            text += f" ({self.file_path})"
        return text


class TraxSyntaxError(TraxError):
    """The unit could not be parsed."""


class TraxImportError(TraxError):
    """Missing or duplicated import of the ``Data`` marker."""


class TraxClassError(TraxError):
    """Invalid Data class: anonymous, with a constructor, or with a non-property member."""


class TraxPropertyError(TraxError):
    """Unsupported property syntax or type, or untyped property."""
