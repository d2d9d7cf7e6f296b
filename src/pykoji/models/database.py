"""Request models and enums for the database API."""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Any

from pydantic import field_validator

from pykoji.models._base import KojiBaseModel


class DatabaseRoute(StrEnum):
    """API routes for database methods."""

    ARRAY_PUSH = "/v1/store/update/push"
    ARRAY_REMOVE = "/v1/store/update/remove"
    DELETE = "/v1/store/delete"
    GET = "/v1/store/get"
    GET_ALL = "/v1/store/getAll"
    GET_ALL_WHERE = "/v1/store/getAllWhere"
    GET_COLLECTIONS = "/v1/store/getCollections"
    SEARCH = "/v1/store/search"
    SET = "/v1/store/set"
    UPDATE = "/v1/store/update"


class PredicateOperator(StrEnum):
    """Comparison operators accepted by predicate queries."""

    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL_TO = "<="
    EQUAL_TO = "=="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL_TO = ">="
    NOT_EQUAL_TO = "!="
    ARRAY_CONTAINS = "array-contains"
    ARRAY_CONTAINS_ANY = "array-contains-any"
    IN = "in"
    NOT_IN = "not-in"


class DatabaseHttpStatusCode(IntEnum):
    """Status values the database API reports for write operations.

    ``BAD_REQUEST`` covers unparseable, missing or oversized data and
    invalid paths; ``UNAUTHORIZED`` an expired, missing or invalid project
    token; ``PRECONDITION_FAILED`` an ETag mismatch.
    """

    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    PRECONDITION_FAILED = 412
    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503


class CollectionRequest(KojiBaseModel):
    """Request targeting a collection."""

    collection: str

    @field_validator("collection")
    @classmethod
    def _collection_non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("collection must be non-empty")
        return value


class DocumentRequest(CollectionRequest):
    document_name: str | None = None


class SearchRequest(CollectionRequest):
    query_key: str
    query_value: str


class Predicate(KojiBaseModel):
    key: str
    operation: PredicateOperator
    value: Any


class GetWhereRequest(CollectionRequest):
    predicate: Predicate


class GetAllRequest(CollectionRequest):
    document_names: list[str]


class GetAllWhereRequest(CollectionRequest):
    predicate_key: str
    predicate_operation: PredicateOperator
    predicate_values: list[Any]


class DocumentWriteRequest(CollectionRequest):
    """Body shared by set, update, array push and array remove."""

    document_name: str
    document_body: Any
    return_doc: bool | None = None
