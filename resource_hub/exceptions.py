"""
Custom Exception Classes for Resource Hub

This module defines custom exceptions for better error handling and
consistent error responses across the application.

Rendering never raises these for missing or unknown content: the view
renderer turns a missing resource into a placeholder fragment. They surface
on the JSON endpoints, where a missing id is a real 404.
"""

import enum
from typing import Any

from fastapi import status


class ErrorCode(str, enum.Enum):
    """Machine-readable error codes returned in the error envelope."""

    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_RESOURCE_NOT_FOUND = "RESOURCE_RESOURCE_NOT_FOUND"
    RESOURCE_COLLECTION_NOT_FOUND = "RESOURCE_COLLECTION_NOT_FOUND"
    BLOCK_KIND_UNKNOWN = "BLOCK_KIND_UNKNOWN"
    EXTENSION_POINT_UNKNOWN = "EXTENSION_POINT_UNKNOWN"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class HubError(Exception):
    """Base exception class for all Resource Hub exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Not Found Exceptions
# ============================================================================


class NotFoundError(HubError):
    """Base class for not found errors"""

    def __init__(
        self,
        entity_type: str,
        entity_id: Any | None = None,
        error_code: ErrorCode = ErrorCode.RESOURCE_NOT_FOUND,
    ):
        message = f"{entity_type} not found"
        if entity_id is not None:
            message = f"{entity_type} with id '{entity_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code=error_code,
            details={"entity_type": entity_type, "entity_id": entity_id},
        )


class ResourceNotFoundError(NotFoundError):
    """Raised when a resource is not found"""

    def __init__(self, resource_id: Any | None = None):
        super().__init__("Resource", resource_id, ErrorCode.RESOURCE_RESOURCE_NOT_FOUND)


class CollectionNotFoundError(NotFoundError):
    """Raised when a collection is not found"""

    def __init__(self, collection_id: Any | None = None):
        super().__init__("Collection", collection_id, ErrorCode.RESOURCE_COLLECTION_NOT_FOUND)


# ============================================================================
# Registry Exceptions
# ============================================================================


class UnknownBlockKindError(HubError):
    """Raised when a render or schema request names a block kind that does not exist"""

    def __init__(self, kind: str, known: list[str]):
        super().__init__(
            message=f"Unknown block kind '{kind}'",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code=ErrorCode.BLOCK_KIND_UNKNOWN,
            details={"kind": kind, "known_kinds": known},
        )


class UnknownExtensionPointError(HubError):
    """Raised when a handler is registered on an extension point nobody defined"""

    def __init__(self, name: str):
        super().__init__(
            message=f"Extension point '{name}' is not defined",
            error_code=ErrorCode.EXTENSION_POINT_UNKNOWN,
            details={"point": name},
        )
