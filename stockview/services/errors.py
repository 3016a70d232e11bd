from __future__ import annotations


class InventoryError(RuntimeError):
    """Base class for failures surfaced by inventory session operations."""

    kind = "inventory_error"
    user_message = "The inventory operation failed."

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.user_message)
        self.detail = detail or self.user_message


class IoError(InventoryError):
    """Raised when a source or destination cannot be opened, read or written."""

    kind = "io_error"
    user_message = "The file could not be read or written."


class FormatError(InventoryError):
    """Raised when a source row does not have the expected shape."""

    kind = "format_error"
    user_message = "The file is not in the expected 8-column inventory format."


class ParseError(FormatError):
    """Raised when a numeric column does not hold an integer."""

    kind = "parse_error"
    user_message = "A price or quantity value is not a whole number."


class NotFoundError(InventoryError):
    kind = "not_found"
    user_message = "No exported database was found."


class EmptyResultError(InventoryError):
    kind = "empty_result"
    user_message = "The exported database contains no items."


class StorageError(InventoryError):
    kind = "storage_error"
    user_message = "The database could not be created or written."


class FontResolutionError(InventoryError):
    kind = "font_resolution_error"
    user_message = "The reference font used for column sizing is not available."
