"""MetaProp - Error taxonomy.

Every per-record failure is a MetaPropError carrying a stable error code.
The batch runner catches MetaPropError at the record boundary and files
the record into the report; nothing else is caught there.

Document-level failures (unreadable file, unknown format) are raised by
the loader before a batch starts and are not per-record errors.
"""

from __future__ import annotations

from enum import StrEnum


class MetaPropErrorCode(StrEnum):
    """Error codes for per-record failures."""

    MALFORMED_RECORD = "MALFORMED_RECORD"
    UNSUPPORTED_META_TYPE = "UNSUPPORTED_META_TYPE"
    UNKNOWN_CATEGORY_ID = "UNKNOWN_CATEGORY_ID"
    STORAGE_KIND_MISMATCH = "STORAGE_KIND_MISMATCH"
    UNSUPPORTED_STORAGE_KIND = "UNSUPPORTED_STORAGE_KIND"
    INVALID_INTEGER_VALUE = "INVALID_INTEGER_VALUE"
    INVALID_DOUBLE_VALUE = "INVALID_DOUBLE_VALUE"
    TARGET_NOT_FOUND = "TARGET_NOT_FOUND"
    TARGET_READ_ONLY = "TARGET_READ_ONLY"
    FILE_OR_LINK_UNSUPPORTED = "FILE_OR_LINK_UNSUPPORTED"
    WRITE_FAILED = "WRITE_FAILED"
    TARGET_UNAVAILABLE = "TARGET_UNAVAILABLE"


class MetaPropError(Exception):
    """Base exception for per-record errors."""

    def __init__(self, error_code: str, message: str):
        self.error_code = error_code
        self.message = message
        super().__init__(f"{error_code}: {message}")


class MalformedRecordError(MetaPropError):
    """Raw record cannot be decoded into MetaProp fields."""

    def __init__(self, reason: str, record: object = None):
        self.record = record
        super().__init__(MetaPropErrorCode.MALFORMED_RECORD, reason)


class UnsupportedMetaTypeError(MetaPropError):
    """metaType is not one of the recognized literals."""

    def __init__(self, meta_type: object):
        self.meta_type = meta_type
        super().__init__(
            MetaPropErrorCode.UNSUPPORTED_META_TYPE, f"Unsupported metaType {meta_type!r}"
        )


class UnknownCategoryIdError(MetaPropError):
    """categoryId is outside the target system's grouping domain."""

    def __init__(self, category_id: str):
        self.category_id = category_id
        super().__init__(
            MetaPropErrorCode.UNKNOWN_CATEGORY_ID, f"Unknown categoryId {category_id!r}"
        )


class StorageKindMismatchError(MetaPropError):
    """Target slot storage kind cannot hold this metaType's value."""

    def __init__(self, meta_type: str, storage_kind: str):
        super().__init__(
            MetaPropErrorCode.STORAGE_KIND_MISMATCH,
            f"Cannot write {meta_type} value to {storage_kind} slot",
        )


class UnsupportedStorageKindError(MetaPropError):
    """Target slot storage kind has no zero value to reset to."""

    def __init__(self, storage_kind: str):
        super().__init__(
            MetaPropErrorCode.UNSUPPORTED_STORAGE_KIND,
            f"Cannot set this storage kind: {storage_kind}",
        )


class InvalidIntegerValueError(MetaPropError):
    """displayValue of an Int property does not parse as an integer."""

    def __init__(self, value: str):
        super().__init__(
            MetaPropErrorCode.INVALID_INTEGER_VALUE, f"Invalid int property value {value!r}"
        )


class InvalidDoubleValueError(MetaPropError):
    """displayValue of a Double property does not parse as a number."""

    def __init__(self, value: str):
        super().__init__(
            MetaPropErrorCode.INVALID_DOUBLE_VALUE, f"Invalid double property value {value!r}"
        )


class TargetNotFoundError(MetaPropError):
    """No target slot exists for the record."""

    def __init__(self, external_id: str, component: str, name: str):
        super().__init__(
            MetaPropErrorCode.TARGET_NOT_FOUND,
            f"No target slot for externalId={external_id!r} component={component!r} "
            f"name={name!r}",
        )


class TargetReadOnlyError(MetaPropError):
    """Target slot exists but is not write-eligible."""

    def __init__(self, name: str):
        super().__init__(MetaPropErrorCode.TARGET_READ_ONLY, f"Target slot {name!r} is read-only")


class FileOrLinkUnsupportedError(MetaPropError):
    """File and Link properties are rejected unless explicitly allowed."""

    def __init__(self, meta_type: str):
        super().__init__(
            MetaPropErrorCode.FILE_OR_LINK_UNSUPPORTED,
            f"{meta_type} properties are not supported for direct write",
        )


class TargetUnavailableError(MetaPropError):
    """Target resolver or slot factory failed while looking up a slot."""

    def __init__(self, name: str, reason: str):
        super().__init__(
            MetaPropErrorCode.TARGET_UNAVAILABLE, f"Target lookup for {name!r} failed: {reason}"
        )


class WriteFailedError(MetaPropError):
    """Target write collaborator reported failure."""

    def __init__(self, name: str, reason: str = "target rejected the value"):
        super().__init__(MetaPropErrorCode.WRITE_FAILED, f"Write to {name!r} failed: {reason}")


# --- Document-level errors (raised before a batch starts) ---


class DocumentError(Exception):
    """Base exception for input documents that cannot be split into records."""


class UnhandledFormatError(DocumentError):
    """Input file extension is not a recognized meta property format."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unhandled meta property file format: {extension}")


class MalformedDocumentError(DocumentError):
    """Input document content cannot be split into records."""
