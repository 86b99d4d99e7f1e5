"""Admission enquiries for one tenant (feature online_admissions)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from enum import Enum
from typing import Any

from msls.domain.context import TenantContext
from msls.domain.enums import EnquiryStatus
from msls.domain.exceptions import ResourceNotFoundException, ValidationException
from msls.shared.utils.datetime import utc_now
from msls.shared.utils.generators import format_enquiry_number

logger = logging.getLogger(__name__)

# Converted and closed enquiries are final.
TERMINAL_STATUSES = frozenset({EnquiryStatus.CONVERTED, EnquiryStatus.CLOSED})


class EnquiryService:
    def __init__(
        self,
        enquiry_repo: Any,
        tenant: TenantContext,
        enquiry_factory: Any = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.enquiry_repo = enquiry_repo
        self.tenant = tenant
        self.enquiry_factory = enquiry_factory
        self.clock = clock

    async def next_enquiry_number(self) -> str:
        """Take the next ENQ-YYYY-NNNNN for the current year (sequence restarts each year).

        The repository hands out sequences atomically per tenant and year, so
        concurrent creates never share a number.
        """
        year = self.clock().year
        sequence = await self.enquiry_repo.next_sequence(self.tenant.tenant_id, year)
        return format_enquiry_number(year, sequence)

    async def create(self, data: dict[str, Any]) -> Any:
        fields = {k: v.value if isinstance(v, Enum) else v for k, v in data.items()}
        if fields.get("parent_email"):
            fields["parent_email"] = fields["parent_email"].lower()
        enquiry = self.enquiry_factory(
            tenant_id=self.tenant.tenant_id,
            enquiry_number=await self.next_enquiry_number(),
            status=EnquiryStatus.NEW.value,
            **fields,
        )
        created = await self.enquiry_repo.create(enquiry)
        logger.info("Enquiry %s recorded in tenant %s", created.enquiry_number, self.tenant.tenant_id)
        return created

    async def get(self, enquiry_id: str) -> Any:
        enquiry = await self.enquiry_repo.get_by_id(enquiry_id)
        if enquiry is None:
            raise ResourceNotFoundException("admission_enquiry", enquiry_id)
        return enquiry

    async def list(
        self, *, status: EnquiryStatus | None = None, skip: int = 0, limit: int = 50
    ) -> list[Any]:
        return await self.enquiry_repo.list_enquiries(
            status=status.value if status else None, skip=skip, limit=limit
        )

    async def update_status(
        self,
        enquiry_id: str,
        status: EnquiryStatus,
        follow_up_date: date | None = None,
        remarks: str | None = None,
    ) -> Any:
        """Move an enquiry through the pipeline; converted/closed enquiries are final.

        Raises:
            ValidationException: Enquiry is final, or follow-up date is in the past.
        """
        enquiry = await self.get(enquiry_id)
        current = EnquiryStatus(enquiry.status)
        if current in TERMINAL_STATUSES and status != current:
            raise ValidationException(
                f"Enquiry is {current.value} and can no longer change status", field="status"
            )
        if follow_up_date is not None and follow_up_date < self.clock().date():
            raise ValidationException("Follow-up date cannot be in the past", field="follow_up_date")
        enquiry.status = status.value
        if follow_up_date is not None:
            enquiry.follow_up_date = follow_up_date
        if remarks is not None:
            enquiry.remarks = remarks
        return await self.enquiry_repo.update(enquiry)
