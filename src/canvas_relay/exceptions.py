"""Exception classes for canvas-relay."""

from __future__ import annotations


class RelayError(Exception):
    """Base exception for all canvas-relay errors."""


class DecodeError(RelayError):
    """Raised when an inbound payload is not one of the known event shapes."""

    def __init__(self, reason: str, raw: str | None = None) -> None:
        """Initialize the exception.

        Args:
            reason: Why the payload was rejected.
            raw: The offending payload, if available.
        """
        super().__init__(f"Invalid event payload: {reason}")
        self.reason = reason
        self.raw = raw


class RecipientSendError(RelayError):
    """Raised when a message is pushed onto a recipient's closed channel."""

    def __init__(self, connection_id: int | None) -> None:
        """Initialize the exception.

        Args:
            connection_id: The recipient whose channel is closed.
        """
        super().__init__(f"Outbound channel closed for connection {connection_id}")
        self.connection_id = connection_id


class TransportError(RelayError):
    """Raised when the underlying connection fails."""

    def __init__(self, connection_id: int | None, message: str) -> None:
        """Initialize the exception.

        Args:
            connection_id: The connection whose transport failed.
            message: Description of the failure.
        """
        super().__init__(f"{message} (connection {connection_id})")
        self.connection_id = connection_id


class TransportReadError(TransportError):
    """Raised when reading from the connection fails."""

    def __init__(self, connection_id: int | None) -> None:
        """Initialize the exception.

        Args:
            connection_id: The connection that could not be read.
        """
        super().__init__(connection_id, "Failed to read from connection")


class TransportWriteError(TransportError):
    """Raised when writing to the connection fails."""

    def __init__(self, connection_id: int | None) -> None:
        """Initialize the exception.

        Args:
            connection_id: The connection that could not be written to.
        """
        super().__init__(connection_id, "Failed to write to connection")


class RegistryInvariantViolation(RelayError):
    """Raised when a connection identifier is registered twice."""

    def __init__(self, connection_id: int) -> None:
        """Initialize the exception.

        Args:
            connection_id: The identifier that is already registered.
        """
        super().__init__(f"Connection {connection_id} is already registered")
        self.connection_id = connection_id
