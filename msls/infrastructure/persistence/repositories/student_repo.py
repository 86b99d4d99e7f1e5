"""Student repository (tenant-scoped session)."""

from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from msls.domain.exceptions import DuplicateRecordException
from msls.infrastructure.persistence.models.student import Student
from msls.infrastructure.persistence.repositories.base import BaseRepository


class StudentRepository(BaseRepository[Student]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Student)

    async def get_by_admission_number(self, admission_number: str) -> Student | None:
        return await self.first_where(Student.admission_number == admission_number)

    async def create(self, obj: Student) -> Student:
        """Insert inside a savepoint; a concurrent insert of the same admission
        number surfaces as DuplicateRecordException instead of a database error.
        """
        try:
            async with self.db.begin_nested():
                return await super().create(obj)
        except IntegrityError as e:
            raise DuplicateRecordException(
                "student", "admission_number", obj.admission_number
            ) from e

    async def search(
        self,
        *,
        status: str | None = None,
        query: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> tuple[list[Student], int]:
        """Return one page of students and the total count for the filters.

        query matches first/last name or admission number (case-insensitive prefix).
        """
        stmt = select(Student)
        if status:
            stmt = stmt.where(Student.status == status)
        if query:
            pattern = f"{query.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Student.first_name).like(pattern),
                    func.lower(Student.last_name).like(pattern),
                    func.lower(Student.admission_number).like(pattern),
                )
            )
        return await self.page(
            stmt.order_by(Student.last_name, Student.first_name, Student.id), skip, limit
        )
