"""Errors shared by the FluentForm packages.

Every error carries a ``retryable`` flag so callers can tell a flaky
collaborator from a request that will never succeed.
"""


class FluentFormError(Exception):
    """Base class for errors raised by FluentForm code.

    Args:
        msg: Error message
        retryable: Whether repeating the failed operation may succeed
    """

    def __init__(self, *, msg: str, retryable: bool = True) -> None:
        super().__init__(msg)
        self._retryable = retryable

    @property
    def retryable(self) -> bool:
        return self._retryable


class WrappedExceptionError(FluentFormError):
    """Error raised in place of a lower-level exception, which stays available as ``details``."""

    def __init__(self, *, exception: Exception, retryable: bool = True) -> None:
        super().__init__(msg=f"{type(self).__name__}: {exception}", retryable=retryable)
        self._details = exception

    @property
    def details(self) -> Exception:
        return self._details


class MissingConfigError(FluentFormError):
    """A setting needed for the requested operation is not configured."""

    def __init__(self, *, config_key_name: str) -> None:
        super().__init__(msg=f"Missing required config key: {config_key_name}", retryable=False)
        self.config_key_name = config_key_name


class HTTPError(FluentFormError):
    """Non-success response from an HTTP collaborator.

    Args:
        url: Requested URL
        status_code: Response status
        method: Request method
        response_text: Start of the response body, for diagnostics
        retryable: Whether the request may succeed when repeated
    """

    def __init__(
        self,
        *,
        url: str,
        status_code: int,
        method: str = "GET",
        response_text: str = "",
        retryable: bool = True,
    ) -> None:
        msg = f"{method} {url} returned {status_code}"
        if response_text:
            msg = f"{msg}: {response_text}"
        super().__init__(msg=msg, retryable=retryable)
        self.url = url
        self.status_code = status_code
        self.response_text = response_text


class FeedbackServiceError(WrappedExceptionError):
    """The coaching feedback service could not produce text.

    Not retryable by default; transport failures set ``retryable`` explicitly.
    """

    def __init__(self, *, exception: Exception, retryable: bool = False) -> None:
        super().__init__(exception=exception, retryable=retryable)
