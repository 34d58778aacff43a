"""
Core module: configuration, exceptions, logging and locking primitives.
"""

from discovery_tree.core.config import DiscoveryTreeConfig, LoggingConfig, StorageConfig
from discovery_tree.core.exceptions import (
    ConfigurationError,
    ConstraintViolationError,
    DiscoveryTreeError,
    FileSystemError,
    NotFoundError,
    ValidationError,
)
from discovery_tree.core.locking import ReadWriteLock

__all__ = [
    "DiscoveryTreeConfig",
    "LoggingConfig",
    "StorageConfig",
    "DiscoveryTreeError",
    "ValidationError",
    "NotFoundError",
    "ConstraintViolationError",
    "FileSystemError",
    "ConfigurationError",
    "ReadWriteLock",
]
