"""Unit tests for cache keys, object storage keys, tenant id format and generators."""

import pytest

from msls.core.cache_keys import (
    feature_all_pattern,
    feature_key,
    feature_tenant_pattern,
    permission_key,
    permission_tenant_pattern,
    tenant_key,
)
from msls.core.storage_keys import (
    STUDENT_PHOTO_CATEGORY,
    is_tenant_object_key,
    tenant_object_key,
)
from msls.core.tenant_validation import is_valid_tenant_id_format
from msls.domain.exceptions import InvalidTenantIdException
from msls.shared.utils.generators import format_enquiry_number, generate_cuid


def test_cache_keys() -> None:
    assert tenant_key("t1") == "tenant:t1"
    assert permission_key("t1", "u1") == "permission:t1:u1"
    assert permission_tenant_pattern("t1") == "permission:t1:*"
    assert feature_key("t1") == "feature:t1:_tenant"
    assert feature_key("t1", "u1") == "feature:t1:u1"
    assert feature_tenant_pattern("t1") == "feature:t1:*"
    assert feature_all_pattern() == "feature:*"


def test_cache_key_components_cannot_contain_separator() -> None:
    with pytest.raises(ValueError):
        tenant_key("a:b")
    with pytest.raises(ValueError):
        permission_key("t1", "u:1")


@pytest.mark.parametrize(
    ("value", "valid"),
    [
        ("t1", True),
        ("clx9abc_DEF-123", True),
        ("a" * 64, True),
        ("a" * 65, False),
        ("", False),
        (None, False),
        ("has space", False),
        ("semi;colon", False),
        ("quote'", False),
    ],
)
def test_tenant_id_format(value: str | None, valid: bool) -> None:
    assert is_valid_tenant_id_format(value) is valid


def test_tenant_object_key_keeps_only_basename() -> None:
    key = tenant_object_key("t1", STUDENT_PHOTO_CATEGORY, "../../other/evil.png")
    assert key == "tenants/t1/students/photos/evil.png"
    assert is_tenant_object_key("t1", key)
    assert not is_tenant_object_key("t2", key)


def test_tenant_object_key_rejects_bad_tenant() -> None:
    with pytest.raises(InvalidTenantIdException):
        tenant_object_key("../t1", "x", "a.png")


def test_enquiry_number_format() -> None:
    assert format_enquiry_number(2026, 42) == "ENQ-2026-00042"
    with pytest.raises(ValueError):
        format_enquiry_number(2026, 0)


def test_cuids_are_unique_and_valid_tenant_ids() -> None:
    ids = {generate_cuid() for _ in range(50)}
    assert len(ids) == 50
    assert all(is_valid_tenant_id_format(i) for i in ids)
