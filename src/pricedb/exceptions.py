"""Error taxonomy shared by the storage layer, the pipelines and the API."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    MALFORMED_ARCHIVE = "MALFORMED_ARCHIVE"
    NOT_FOUND = "NOT_FOUND"
    ROW_SHAPE = "ROW_SHAPE"
    FIELD_PARSE = "FIELD_PARSE"
    STORAGE = "STORAGE"
    SERIALIZATION = "SERIALIZATION"
    UPSTREAM_QUERY = "UPSTREAM_QUERY"


class PriceDBError(Exception):
    """Base exception for all pricedb errors.

    ``context`` names the step that failed ("insert record", "parse row 3").
    The underlying failure is attached with ``raise ... from`` and rendered
    by :meth:`describe` as a ``": "``-joined cause chain.
    """

    kind: ErrorKind = ErrorKind.STORAGE

    def __init__(
        self,
        context: str,
        detail: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(context)
        self.context = context
        self.detail = detail
        self.details = details or {}

    def _own_text(self) -> str:
        if self.detail:
            return f"{self.context}: {self.detail}"
        return self.context

    def describe(self) -> str:
        """Render this error and its causes as one line of text."""
        parts = [self._own_text()]
        cause = self.__cause__
        while cause is not None:
            if isinstance(cause, PriceDBError):
                parts.append(cause._own_text())
            else:
                parts.append(str(cause) or cause.__class__.__name__)
            cause = cause.__cause__
        return ": ".join(parts)

    def to_dict(self) -> dict:
        return {
            "error": self.kind.value,
            "message": self.describe(),
            "details": self.details,
        }

    def __str__(self) -> str:
        return self.describe()


class MalformedArchiveError(PriceDBError):
    """Upload is not a readable zip archive."""

    kind = ErrorKind.MALFORMED_ARCHIVE


class NotFoundError(PriceDBError):
    """Archive holds no ``.csv`` entry."""

    kind = ErrorKind.NOT_FOUND


class RowShapeError(PriceDBError):
    """CSV row is missing, too short, or badly quoted."""

    kind = ErrorKind.ROW_SHAPE


class FieldParseError(PriceDBError):
    """CSV field could not be converted to its typed value."""

    kind = ErrorKind.FIELD_PARSE


class StorageError(PriceDBError):
    """Connection, transaction or statement failure."""

    kind = ErrorKind.STORAGE


class SerializationError(PriceDBError):
    """Response body could not be encoded."""

    kind = ErrorKind.SERIALIZATION


class UpstreamQueryError(PriceDBError):
    """Listing query behind an export failed."""

    kind = ErrorKind.UPSTREAM_QUERY
