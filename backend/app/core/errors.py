"""Error taxonomy shared by the store, the model boundary and the HTTP layer."""


class ChatError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ChatError):
    """Malformed or out-of-bounds input. Raised before anything is persisted."""

    status_code = 400


class NotFoundError(ChatError):
    status_code = 404


class ExternalServiceError(ChatError):
    """The hosted model call failed (network, quota, malformed response)."""

    status_code = 502


class StorageError(ChatError):
    status_code = 500
