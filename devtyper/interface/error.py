"""Interface layer errors."""


class InterfaceError(Exception):
    """Base interface error."""

    pass


class MalformedAuthorizationError(InterfaceError):
    """Authorization header is present but not a bearer token."""

    pass
