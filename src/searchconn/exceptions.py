"""Search client exceptions."""


class ClientError(Exception):
    """Base exception for search client errors."""


class ConfigError(ClientError):
    """Raised when client configuration is missing or invalid."""


class ConnectionError(ClientError):
    """Raised when the client cannot connect to, or verify, the search backend."""


class AlreadyExistsError(ClientError):
    """Raised when creating an index that is already present."""


class DocumentNotFoundError(ClientError):
    """Raised when a requested document does not exist."""


class BackendError(ClientError):
    """Raised when the search backend rejects or fails a request."""


class DeleteError(ClientError):
    """Raised when a delete request completes but the document was not deleted."""


class InvalidPayloadError(ClientError):
    """Raised when a document body or mapping cannot be turned into a JSON object."""


class NotRegisteredError(ClientError):
    """Raised when no client is registered under the requested name."""
