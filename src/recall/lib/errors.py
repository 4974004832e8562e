"""Custom exception hierarchy for Recall configuration and operations."""


class RecallError(Exception):
    """Base exception for all Recall errors.

    All Recall-specific exceptions inherit from this class, enabling
    centralized exception handling at the CLI and ingestion boundaries.
    """

    pass


class ConfigError(RecallError):
    """Exception raised for configuration errors.

    This exception is raised when configuration loading or parsing fails.
    It includes field-specific information to help users identify and fix
    configuration issues.

    Attributes:
        field: The configuration field that caused the error
        message: Human-readable error message describing the issue
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize ConfigError with field and message.

        Args:
            field: Configuration field name where error occurred
            message: Descriptive error message
        """
        self.field = field
        self.message = message
        super().__init__(f"Configuration error in '{field}': {message}")


class ProviderError(RecallError):
    """Exception raised when an embedding or completion backend fails.

    Attributes:
        provider: Name of the backend that failed (e.g. "ollama")
        message: Human-readable error message
    """

    def __init__(self, provider: str, message: str) -> None:
        """Create a provider error with context.

        Args:
            provider: Backend name
            message: Descriptive error message
        """
        self.provider = provider
        self.message = message
        super().__init__(f"Provider '{provider}' failed: {message}")


class EmbeddingError(ProviderError):
    """Raised when an embedding request fails or returns no vector."""

    pass


class CompletionError(ProviderError):
    """Raised when a chat completion request fails."""

    pass


class StorageError(RecallError):
    """Exception raised when the vector store cannot be read or written.

    Attributes:
        path: Path of the store file involved
        message: Human-readable error message
    """

    def __init__(self, path: str, message: str) -> None:
        """Initialize StorageError with path and message.

        Args:
            path: Store file path
            message: Descriptive error message
        """
        self.path = path
        self.message = message
        super().__init__(f"Vector store error at {path}: {message}")


class IngestionError(RecallError):
    """Exception raised when a single source file cannot be ingested.

    Attributes:
        source: Path or name of the source that failed
        message: Human-readable error message
    """

    def __init__(self, source: str, message: str) -> None:
        """Create an ingestion error for one source."""
        self.source = source
        self.message = message
        super().__init__(f"Failed to ingest '{source}': {message}")
