"""Errors raised while building or parsing identifiers."""

from utils.timestamp import format_timestamp


class BaseUidError(ValueError):
    """Base error with timestamp and context for tracking."""

    def __init__(self, message, context=None, cause=None):
        super().__init__(message)
        self.timestamp = format_timestamp()
        self.context = context or {}
        self.cause = cause

    def to_dict(self):
        return {"error": type(self).__name__, "msg": str(self), "context": self.context}


class NegativeInputError(BaseUidError):
    """Timestamp, random or value argument is negative."""

    def __init__(self, message, field=None, value=None, **kwargs):
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = value
        super().__init__(message, context=context, **kwargs)


class InvalidEncodingError(BaseUidError):
    """Text is not valid base64url."""

    def __init__(self, message, text=None, **kwargs):
        context = kwargs.pop("context", {})
        if text is not None:
            context["text"] = text
        super().__init__(message, context=context, **kwargs)


class LengthError(BaseUidError):
    """Text is longer than any 64-bit value can encode to."""

    def __init__(self, message, length=None, limit=None, **kwargs):
        context = kwargs.pop("context", {})
        if length is not None:
            context["length"] = length
        if limit is not None:
            context["limit"] = limit
        super().__init__(message, context=context, **kwargs)


class TimestampOverflowError(BaseUidError):
    """Timestamp does not fit in 44 bits."""

    def __init__(self, message, timestamp=None, **kwargs):
        context = kwargs.pop("context", {})
        if timestamp is not None:
            context["timestamp"] = timestamp
        super().__init__(message, context=context, **kwargs)


class ValueOverflowError(BaseUidError):
    """Value does not fit in 64 bits."""

    def __init__(self, message, value=None, **kwargs):
        context = kwargs.pop("context", {})
        if value is not None:
            context["value"] = value
        super().__init__(message, context=context, **kwargs)
