"""DTOs for student use cases."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StudentPage:
    """One page of students plus the total matching the filters."""

    items: list[Any]
    total: int
    skip: int
    limit: int


@dataclass(frozen=True)
class PhotoUploadResult:
    student_id: str
    photo_key: str
    checksum: str
    size: int
