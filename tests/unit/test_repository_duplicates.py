"""Unique-key violations on insert surface as DuplicateRecordException."""

from contextlib import asynccontextmanager
from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from msls.domain.exceptions import DuplicateRecordException
from msls.infrastructure.persistence.models import AdmissionEnquiry, Student
from msls.infrastructure.persistence.repositories import EnquiryRepository, StudentRepository


class _ConflictingSession:
    """Session whose flush fails the way a concurrent insert of the same key does."""

    def __init__(self) -> None:
        self.added: list[object] = []
        self.savepoints = 0

    def add(self, obj: object) -> None:
        self.added.append(obj)

    @asynccontextmanager
    async def begin_nested(self):
        self.savepoints += 1
        yield

    async def flush(self) -> None:
        raise IntegrityError("INSERT", {}, Exception("duplicate key value"))

    async def refresh(self, obj: object) -> None:
        pass


async def test_student_insert_race_is_duplicate_record() -> None:
    session = _ConflictingSession()
    student = Student(
        tenant_id="t1",
        admission_number="ADM-7",
        first_name="Asha",
        last_name="Rao",
        date_of_birth=date(2015, 1, 1),
        gender="female",
        admission_date=date(2026, 1, 5),
    )
    with pytest.raises(DuplicateRecordException) as exc:
        await StudentRepository(session).create(student)
    assert exc.value.details == {
        "resource_type": "student",
        "field": "admission_number",
        "value": "ADM-7",
    }
    assert session.savepoints == 1


async def test_enquiry_number_clash_is_duplicate_record() -> None:
    session = _ConflictingSession()
    enquiry = AdmissionEnquiry(
        tenant_id="t1",
        enquiry_number="ENQ-2026-00001",
        student_name="Ravi",
        class_applying="Grade 1",
        parent_name="Meera",
        parent_phone="9000000000",
    )
    with pytest.raises(DuplicateRecordException) as exc:
        await EnquiryRepository(session).create(enquiry)
    assert exc.value.details["value"] == "ENQ-2026-00001"
