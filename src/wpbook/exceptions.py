"""Custom exceptions for wpbook."""


class WpBookError(Exception):
    """Base exception for wpbook operations."""


class FetchError(WpBookError):
    """Error during content fetching."""


class AuthenticationError(FetchError):
    """Credentials were rejected or lack permission."""


class EndpointNotFoundError(FetchError):
    """The requested post type is not registered on the site."""


class NoContentError(WpBookError):
    """The selected book has no chapters."""
