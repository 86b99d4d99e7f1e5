"""Admission enquiry repository (tenant-scoped session)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from msls.domain.exceptions import DuplicateRecordException
from msls.infrastructure.persistence.models.enquiry import (
    AdmissionEnquiry,
    EnquiryNumberSequence,
)
from msls.infrastructure.persistence.repositories.base import BaseRepository


class EnquiryRepository(BaseRepository[AdmissionEnquiry]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AdmissionEnquiry)

    async def next_sequence(self, tenant_id: str, year: int) -> int:
        """Take the next enquiry sequence for (tenant, year) in one atomic upsert.

        The row lock taken by ON CONFLICT DO UPDATE serializes concurrent
        callers, so each gets a distinct value.
        """
        seq = EnquiryNumberSequence
        stmt = (
            insert(seq)
            .values(tenant_id=tenant_id, year=year, last_sequence=1)
            .on_conflict_do_update(
                index_elements=[seq.tenant_id, seq.year],
                set_={"last_sequence": seq.last_sequence + 1},
            )
            .returning(seq.last_sequence)
        )
        return int(await self.db.scalar(stmt))

    async def create(self, obj: AdmissionEnquiry) -> AdmissionEnquiry:
        """Insert inside a savepoint; a taken enquiry number becomes DuplicateRecordException."""
        try:
            async with self.db.begin_nested():
                return await super().create(obj)
        except IntegrityError as e:
            raise DuplicateRecordException(
                "admission_enquiry", "enquiry_number", obj.enquiry_number
            ) from e

    async def list_enquiries(
        self, *, status: str | None = None, skip: int = 0, limit: int = 50
    ) -> list[AdmissionEnquiry]:
        stmt = select(AdmissionEnquiry)
        if status:
            stmt = stmt.where(AdmissionEnquiry.status == status)
        result = await self.db.execute(
            stmt.order_by(AdmissionEnquiry.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())
