class ScreeningError(Exception):
    """Base class for failures while screening a batch of resumes."""


class InvalidScreeningInput(ScreeningError):
    pass


class LLMConfigurationError(ScreeningError):
    """Provider unknown or its API key is missing."""


class LLMRequestError(ScreeningError):
    """The provider could not be reached or answered with an error status."""

    def __init__(self, message: str, status_code: int = None):
        self.status_code = status_code
        super().__init__(message)


class LLMResponseError(ScreeningError):
    """The provider answered, but not with a usable screening result."""
