"""Exceptions raised by the command filtering engine."""


class ConfigurationError(ValueError):
    """Filter criteria that cannot be used (bad regex, out-of-range value)."""

    def __init__(self, field_name: str, message: str):
        self.field_name = field_name
        super().__init__(f"Invalid filter criteria '{field_name}': {message}")


class HistoryFormatError(ValueError):
    """A command history record could not be parsed."""

    def __init__(self, source: str, line_number: int, message: str):
        self.source = source
        self.line_number = line_number
        super().__init__(f"{source}:{line_number}: {message}")
