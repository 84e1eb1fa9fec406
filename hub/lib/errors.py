"""
Custom error classes for Channel Hub.
Structured error handling with error codes across all modules.

Hierarchy:
    HubError
    ├── ValidationError
    │   └── UnknownChannelError
    ├── StoreError
    │   ├── NotFoundError
    │   └── DuplicateTargetError
    ├── SessionError
    └── ConfigError
"""


class HubError(Exception):
    """Base exception for all Channel Hub errors."""

    def __init__(self, message: str, code: str = "UNKNOWN", details: dict = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(f"[{code}] {message}")


# --- Validation Errors ---

class ValidationError(HubError):
    """Submitted data is missing a required field. Never reaches the store."""

    def __init__(self, message: str, field: str = None, code: str = "VALIDATION_FAILED"):
        self.field = field
        super().__init__(message, code=code, details={"field": field})


class UnknownChannelError(ValidationError):
    """Channel identifier is not in the registry."""

    def __init__(self, channel: str):
        super().__init__(
            f"Unknown channel: {channel}",
            field="channel", code="UNKNOWN_CHANNEL",
        )
        self.channel = channel


# --- Store Errors ---

class StoreError(HubError):
    """A create/list/update/delete call against the entity store failed.

    ``message`` carries the store's own error text verbatim.
    """

    def __init__(self, message: str, operation: str = None, code: str = "STORE_ERROR"):
        self.operation = operation
        super().__init__(message, code=code, details={"operation": operation})


class NotFoundError(StoreError):
    """Record does not exist."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(
            f"{kind} not found: {record_id}",
            operation=f"get_{kind}", code="NOT_FOUND",
        )
        self.kind = kind
        self.record_id = record_id


class DuplicateTargetError(StoreError):
    """A target for this channel and product already exists."""

    def __init__(self, channel: str, product: str):
        super().__init__(
            "A target already exists for this channel and product combination",
            operation="create_target", code="DUPLICATE_TARGET",
        )
        self.details.update({"channel": channel, "product": product})


# --- Session Errors ---

class SessionError(HubError):
    """Missing, unknown, or logged-out session."""

    def __init__(self, message: str = "Session is not active"):
        super().__init__(message, code="SESSION_INVALID")


# --- Config Errors ---

class ConfigError(HubError):
    """Configuration is missing or unreadable."""

    def __init__(self, message: str, config_path: str = None):
        super().__init__(
            message, code="CONFIG_ERROR",
            details={"config_path": config_path},
        )
