"""Exception hierarchy for the access-log middleware."""


class AccessLogError(Exception):
    """Base access-log error."""


class UnknownLogFormatError(AccessLogError, ValueError):
    """Raised when a middleware is built with a format that does not exist."""


class AddressError(AccessLogError, ValueError):
    """Raised when a peer address cannot be split into host and port."""
