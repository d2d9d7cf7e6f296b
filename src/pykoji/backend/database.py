"""Koji database helper for the backend of a Koji.

Endpoints (POST, base ``KojiConfig.database_url``):
  - /v1/store/get, /v1/store/getAll, /v1/store/getAllWhere
  - /v1/store/getCollections, /v1/store/search
  - /v1/store/set, /v1/store/update, /v1/store/delete
  - /v1/store/update/push, /v1/store/update/remove
"""

from __future__ import annotations

import logging
from typing import Any

from pykoji.backend._base import BackendClient
from pykoji.models.database import (
    DatabaseRoute,
    DocumentRequest,
    DocumentWriteRequest,
    GetAllRequest,
    GetAllWhereRequest,
    GetWhereRequest,
    Predicate,
    PredicateOperator,
    SearchRequest,
)

_logger = logging.getLogger(__name__)


def _field(response: Any, key: str, default: Any = None) -> Any:
    if isinstance(response, dict):
        return response.get(key, default)
    return default


class Database(BackendClient):
    """Document database for the backend of a Koji.

    Write methods return whatever the API answers: a status code (see
    :class:`pykoji.DatabaseHttpStatusCode`), or the updated document when
    ``return_doc`` is true.
    """

    _service = "database"

    def _base_url(self) -> str:
        return self._config.database_url

    async def get(self, collection: str, document_name: str | None = None) -> Any:
        """Get one entry, or the whole collection when *document_name* is omitted."""
        body = DocumentRequest(collection=collection, document_name=document_name).to_body()
        response = await self._post(DatabaseRoute.GET, body)
        return _field(response, "document")

    async def get_collections(self) -> list[str]:
        """List the names of all collections."""
        response = await self._post(DatabaseRoute.GET_COLLECTIONS, {})
        collections = _field(response, "collections", [])
        return list(collections) if isinstance(collections, list) else []

    async def search(self, collection: str, query_key: str, query_value: str) -> Any:
        """Search *collection* for entries whose *query_key* matches *query_value*."""
        body = SearchRequest(collection=collection, query_key=query_key, query_value=query_value).to_body()
        return await self._post(DatabaseRoute.SEARCH, body)

    async def get_where(
        self,
        collection: str,
        predicate_key: str,
        predicate_operation: PredicateOperator | str,
        predicate_value: Any,
    ) -> Any:
        """Get entries satisfying one predicate, e.g. ``("score", ">", 10)``."""
        request = GetWhereRequest(
            collection=collection,
            predicate=Predicate(
                key=predicate_key,
                operation=PredicateOperator(predicate_operation),
                value=predicate_value,
            ),
        )
        response = await self._post(DatabaseRoute.GET, request.to_body())
        return _field(response, "document")

    async def get_all(self, collection: str, document_names: list[str]) -> Any:
        """Get the entries named in *document_names*."""
        body = GetAllRequest(collection=collection, document_names=document_names).to_body()
        response = await self._post(DatabaseRoute.GET_ALL, body)
        return _field(response, "results")

    async def get_all_where(
        self,
        collection: str,
        predicate_key: str,
        predicate_operation: PredicateOperator | str,
        predicate_values: list[Any],
    ) -> Any:
        """Get entries satisfying a predicate against several values."""
        body = GetAllWhereRequest(
            collection=collection,
            predicate_key=predicate_key,
            predicate_operation=PredicateOperator(predicate_operation),
            predicate_values=predicate_values,
        ).to_body()
        response = await self._post(DatabaseRoute.GET_ALL_WHERE, body)
        return _field(response, "results")

    async def _write(
        self,
        route: DatabaseRoute,
        collection: str,
        document_name: str,
        document_body: Any,
        return_doc: bool | None,
    ) -> Any:
        body = DocumentWriteRequest(
            collection=collection,
            document_name=document_name,
            document_body=document_body,
            return_doc=return_doc,
        ).to_body()
        _logger.debug("Database write route=%s collection=%s document=%s", route.value, collection, document_name)
        return await self._post(route, body)

    async def set(self, collection: str, document_name: str, document_body: Any, return_doc: bool | None = None) -> Any:
        """Insert a new entry."""
        return await self._write(DatabaseRoute.SET, collection, document_name, document_body, return_doc)

    async def update(
        self, collection: str, document_name: str, document_body: Any, return_doc: bool | None = None
    ) -> Any:
        """Update fields of an existing entry."""
        return await self._write(DatabaseRoute.UPDATE, collection, document_name, document_body, return_doc)

    async def array_push(
        self, collection: str, document_name: str, document_body: Any, return_doc: bool | None = None
    ) -> Any:
        """Append values to array fields of an existing entry."""
        return await self._write(DatabaseRoute.ARRAY_PUSH, collection, document_name, document_body, return_doc)

    async def array_remove(
        self, collection: str, document_name: str, document_body: Any, return_doc: bool | None = None
    ) -> Any:
        """Remove values from array fields of an existing entry."""
        return await self._write(DatabaseRoute.ARRAY_REMOVE, collection, document_name, document_body, return_doc)

    async def delete(self, collection: str, document_name: str) -> Any:
        """Delete an entry."""
        body = DocumentRequest(collection=collection, document_name=document_name).to_body()
        return await self._post(DatabaseRoute.DELETE, body)

