class AuthenticationError(Exception):
    """Base class for every failure raised by the token flows."""
    pass


class ProtocolError(AuthenticationError):
    """Raised when the token endpoint answers with an OAuth2 error."""
    pass


class MalformedResponseError(AuthenticationError):
    """Raised when a token endpoint response is missing or mistypes a field."""
    pass


class TokenTypeMismatchError(AuthenticationError):
    """Raised when `token_type` disagrees with the requested scheme."""
    pass


class UnsupportedGrantError(AuthenticationError):
    """Raised when the issuer does not advertise the requested grant."""
    pass


class MissingTokenEndpointError(AuthenticationError):
    """Raised when the issuer has no token endpoint configured."""
    pass


class MissingSessionStateError(AuthenticationError):
    """Raised when a required session value is absent from storage."""
    pass


class InvalidIdTokenError(AuthenticationError):
    """Raised when an ID token lacks the claims needed to identify the user."""
    pass


class InvalidWebIdError(InvalidIdTokenError):
    """Raised when no usable WebID can be derived from an ID token."""
    pass


class BadTokenClaimsError(AuthenticationError):
    """Raised when a decoded access token has no `sub` claim."""
    pass


class NetworkError(AuthenticationError):
    """Raised when the HTTP transport fails before a response is read."""
    pass


class UnknownIssuerError(AuthenticationError):
    """Raised when no configuration or client is known for an issuer."""
    pass
