"""Exception hierarchy for drafting actions and the model gateway."""


class DrafterError(Exception):
    """Base class for every error raised by minuta_drafter."""


class ValidationError(DrafterError):
    """A required form field is blank. Raised before any request is issued."""

    def __init__(self, missing_fields: list[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(f"Campos obrigatórios ausentes: {', '.join(self.missing_fields)}")


class GatewayError(DrafterError):
    """The remote text-generation call did not produce usable text."""


class EmptyResponseError(GatewayError):
    """Transport succeeded but the response carried no text."""

    def __init__(self, message: str = "A API não retornou um texto válido."):
        super().__init__(message)


class TransportError(GatewayError):
    """Network, auth, quota, timeout or malformed-response failure."""
