"""Exception types for jumppack."""


class JumppackError(Exception):
    """Base class for all jumppack errors."""


class ConfigError(JumppackError):
    """Invalid configuration or call options.

    The message starts with the dotted path of the offending field, e.g.
    ``options.default_view must be "list" or "preview", got "grid"``.
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field} {message}")


class HistoryError(JumppackError):
    """A jump history export could not be read or parsed."""
