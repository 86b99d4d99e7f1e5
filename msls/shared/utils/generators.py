"""Identifiers: CUID2 primary keys and admission enquiry numbers."""

from cuid2 import cuid_wrapper

_next_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """New CUID2 string, used as the primary key of every table."""
    return str(_next_cuid())


def format_enquiry_number(year: int, sequence: int) -> str:
    """ENQ-<year>-<sequence zero-padded to 5>, e.g. ENQ-2026-00042."""
    if sequence < 1:
        raise ValueError("sequence must be positive")
    return f"ENQ-{year:04d}-{sequence:05d}"
