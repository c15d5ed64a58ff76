from __future__ import annotations


class OAuth2Error(RuntimeError):
    """Base class for every error raised by the token client."""


class InvalidStateError(OAuth2Error):
    def __init__(self, message: str = "Response does not belong to this flow.") -> None:
        super().__init__(message)


class MissingAuthorizationCodeError(OAuth2Error):
    def __init__(self, message: str = "No authorization code found in callback.") -> None:
        super().__init__(message)


class MalformedServiceUriError(OAuth2Error):
    pass


class TokenExchangeError(OAuth2Error):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportError(TokenExchangeError):
    pass


class FlowStateError(OAuth2Error):
    pass


class ConfigurationError(OAuth2Error):
    pass


class TokenDecodeError(OAuth2Error):
    pass
