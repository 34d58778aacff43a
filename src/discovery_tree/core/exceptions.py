"""
Custom exceptions for the Discovery Tree system.

Exception hierarchy:
- DiscoveryTreeError (base)
  ├── ValidationError
  ├── NotFoundError
  ├── ConstraintViolationError
  ├── FileSystemError
  └── ConfigurationError

Each class carries its own ``error_code``; the structured fields a subclass
is built from are exposed as attributes and mirrored into ``context``.
"""

from typing import Any, Dict, Optional


class DiscoveryTreeError(Exception):
    """Base exception for all Discovery Tree errors."""

    error_code: str = "DISCOVERY_TREE_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        # Unset optional fields are left out so the rendered text stays short.
        self.context = {k: v for k, v in (context or {}).items() if v is not None}

    def __str__(self) -> str:
        text = f"[{self.error_code}] {self.message}"
        if not self.context:
            return text
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{text} (Context: {details})"


class ValidationError(DiscoveryTreeError):
    """Malformed input the caller can fix (empty description, bad UUID, ...)."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str) -> None:
        if field:
            text = f"validation error on field '{field}': {message}"
        else:
            text = f"validation error: {message}"
        super().__init__(text, context={"field": field or None})
        self.field = field
        self.reason = message


class NotFoundError(DiscoveryTreeError):
    """A referenced entity does not exist."""

    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: str) -> None:
        super().__init__(
            f"{entity_type} with ID '{entity_id}' not found",
            context={"entity_type": entity_type, "entity_id": entity_id},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConstraintViolationError(DiscoveryTreeError):
    """Structurally valid input that breaks a tree-wide rule."""

    error_code = "CONSTRAINT_VIOLATION"

    def __init__(self, constraint: str, message: str) -> None:
        super().__init__(
            f"constraint violation '{constraint}': {message}",
            context={"constraint": constraint},
        )
        self.constraint = constraint
        self.reason = message


class FileSystemError(DiscoveryTreeError):
    """I/O failure while reading or writing the task file.

    The underlying exception is available as ``cause`` and is also chained
    as ``__cause__`` when raised with ``raise ... from``.
    """

    error_code = "FILESYSTEM_ERROR"

    def __init__(
        self,
        operation: str,
        path: Optional[str],
        cause: Optional[BaseException],
    ) -> None:
        if path:
            text = f"filesystem error during {operation} on '{path}': {cause}"
        else:
            text = f"filesystem error during {operation}: {cause}"
        super().__init__(text, context={"operation": operation, "path": path or None})
        self.operation = operation
        self.path = path
        self.cause = cause


class ConfigurationError(DiscoveryTreeError):
    """Invalid or unloadable configuration."""

    error_code = "CONFIGURATION_ERROR"

    def __init__(self, message: str, config_key: Optional[str] = None) -> None:
        super().__init__(message, context={"config_key": config_key})
        self.config_key = config_key
