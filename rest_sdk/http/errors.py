from typing import Optional


class RestClientError(Exception):
    """Base class for REST client errors."""

    pass


class HTTPCallErrorError(RestClientError):
    """Error for HTTP call errors.

    Attributes:
        description: The description of the error.
        status_code: The status code of the error.
        api_message: The API message of the error.
    """

    def __init__(
        self,
        description: str,
        status_code: int,
        api_message: Optional[str],
    ):
        super().__init__(description)
        self.__description = description
        self.__api_message = api_message
        self.__status_code = status_code

    @property
    def description(self) -> str:
        """The description of the error."""
        return self.__description

    @property
    def api_message(self) -> Optional[str]:
        """The API message of the error."""
        return self.__api_message

    @property
    def status_code(self) -> int:
        """The status code of the error."""
        return self.__status_code

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"description='{self.description}', "
            f"api_message='{self.api_message}', "
            f"status_code={self.__status_code})"
        )

    def __str__(self) -> str:
        return self.__repr__()


class InvalidArgumentError(RestClientError):
    """Error raised when a builder call receives a malformed argument."""

    pass


class UnsupportedFormatError(RestClientError):
    """Error raised when no serializer is registered for a data format."""

    pass


class EncodingError(RestClientError):
    """Error for body serialization errors."""

    pass


class InvalidRequestError(RestClientError):
    """Error raised when a request cannot be sent in its current shape."""

    pass
