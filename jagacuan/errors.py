class JagaCuanError(Exception):
    """Base error for the application."""


class ValidationError(JagaCuanError):
    """Raised when request data fails a field-level check."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self):
        data = {"error": self.message}
        if self.field:
            data["field"] = self.field
        return data
