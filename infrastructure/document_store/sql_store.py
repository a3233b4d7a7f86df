from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import MEMBERSHIP_QUERY_LIMIT
from infrastructure.database.models.documents import DocumentRecord, DocumentToken

from .gateway import (
    DocumentNotFoundError,
    DocumentStoreError,
    MembershipQueryError,
    StoredDocument,
)


def _array_elements(value: Any) -> Optional[list[str]]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        return None
    return [element for element in value if isinstance(element, str)]


def _json_equals(expr, value: Any):
    if isinstance(value, bool):
        return expr.as_boolean() == value
    if isinstance(value, int):
        return expr.as_integer() == value
    if isinstance(value, float):
        return expr.as_float() == value
    return expr.as_string() == str(value)


class SqlDocumentStore:
    """Document store backed by the ``documents``/``document_tokens`` tables.

    String-array fields are mirrored into ``document_tokens`` on every write so
    membership queries can use an index instead of scanning JSON.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _to_document(record: DocumentRecord) -> StoredDocument:
        return StoredDocument(id=record.id, fields=dict(record.data or {}))

    @staticmethod
    def _token_rows(
        record: DocumentRecord,
        collection: str,
        fields: Mapping[str, Any],
    ) -> Iterable[DocumentToken]:
        for field_name, value in fields.items():
            elements = _array_elements(value)
            if elements is None:
                continue
            for token in dict.fromkeys(elements):
                yield DocumentToken(
                    document_id=record.id,
                    collection=collection,
                    field=field_name,
                    token=token,
                )

    async def query_by_token_membership(
        self,
        collection: str,
        field: str,
        candidate_tokens: Sequence[str],
        *,
        limit: int,
    ) -> list[StoredDocument]:
        if not candidate_tokens:
            raise MembershipQueryError("Membership query requires at least one candidate")
        if len(candidate_tokens) > MEMBERSHIP_QUERY_LIMIT:
            raise MembershipQueryError(
                f"Membership query accepts at most {MEMBERSHIP_QUERY_LIMIT} candidates, "
                f"got {len(candidate_tokens)}"
            )
        matching_ids = select(DocumentToken.document_id).where(
            DocumentToken.collection == collection,
            DocumentToken.field == field,
            DocumentToken.token.in_(list(candidate_tokens)),
        )
        stmt = (
            select(DocumentRecord)
            .where(
                DocumentRecord.collection == collection,
                DocumentRecord.id.in_(matching_ids),
            )
            .order_by(DocumentRecord.created_at)
            .limit(limit)
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            raise MembershipQueryError(f"Membership query on {collection}.{field} failed") from exc
        return [self._to_document(record) for record in result.scalars().all()]

    async def query_by_name_range(
        self,
        collection: str,
        field: str,
        lower_bound: str,
        upper_bound: str,
        *,
        order_by: str,
        limit: int,
    ) -> list[StoredDocument]:
        value = DocumentRecord.data[field].as_string()
        stmt = (
            select(DocumentRecord)
            .where(
                DocumentRecord.collection == collection,
                value >= lower_bound,
                value <= upper_bound,
            )
            .order_by(DocumentRecord.data[order_by].as_string())
            .limit(limit)
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"Range query on {collection}.{field} failed") from exc
        return [self._to_document(record) for record in result.scalars().all()]

    async def query_by_exact_field(
        self,
        collection: str,
        field: str,
        value: Any,
        *,
        limit: Optional[int] = None,
    ) -> list[StoredDocument]:
        stmt = (
            select(DocumentRecord)
            .where(
                DocumentRecord.collection == collection,
                _json_equals(DocumentRecord.data[field], value),
            )
            .order_by(DocumentRecord.created_at)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"Query on {collection}.{field} failed") from exc
        return [self._to_document(record) for record in result.scalars().all()]

    async def list_documents(
        self,
        collection: str,
        *,
        limit: Optional[int] = None,
    ) -> list[StoredDocument]:
        stmt = (
            select(DocumentRecord)
            .where(DocumentRecord.collection == collection)
            .order_by(DocumentRecord.created_at)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"Listing {collection} failed") from exc
        return [self._to_document(record) for record in result.scalars().all()]

    async def _get_record(self, collection: str, document_id: str) -> Optional[DocumentRecord]:
        stmt = select(DocumentRecord).where(
            DocumentRecord.collection == collection,
            DocumentRecord.id == document_id,
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"Lookup of {collection}/{document_id} failed") from exc
        return result.scalar_one_or_none()

    async def get_document(self, collection: str, document_id: str) -> Optional[StoredDocument]:
        record = await self._get_record(collection, document_id)
        return self._to_document(record) if record else None

    async def create_document(self, collection: str, fields: Mapping[str, Any]) -> str:
        record = DocumentRecord(collection=collection, data=dict(fields))
        try:
            self.db.add(record)
            await self.db.flush()
            self.db.add_all(list(self._token_rows(record, collection, fields)))
            await self.db.flush()
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"Creating document in {collection} failed") from exc
        return record.id

    async def update_document(
        self,
        collection: str,
        document_id: str,
        fields: Mapping[str, Any],
    ) -> None:
        record = await self._get_record(collection, document_id)
        if record is None:
            raise DocumentNotFoundError(collection, document_id)

        array_fields = [name for name, value in fields.items() if _array_elements(value) is not None]
        try:
            record.data = {**(record.data or {}), **dict(fields)}
            if array_fields:
                await self.db.execute(
                    delete(DocumentToken).where(
                        DocumentToken.document_id == record.id,
                        DocumentToken.field.in_(array_fields),
                    )
                )
                self.db.add_all(list(self._token_rows(record, collection, fields)))
            await self.db.flush()
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"Updating {collection}/{document_id} failed") from exc

    async def delete_document(self, collection: str, document_id: str) -> None:
        record = await self._get_record(collection, document_id)
        if record is None:
            raise DocumentNotFoundError(collection, document_id)
        try:
            await self.db.delete(record)
            await self.db.flush()
        except SQLAlchemyError as exc:
            raise DocumentStoreError(f"Deleting {collection}/{document_id} failed") from exc
