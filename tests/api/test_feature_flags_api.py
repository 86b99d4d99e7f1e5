"""Feature flag routes: resolved states and tenant overrides."""

from httpx import AsyncClient

from msls.api.v1.dependencies import get_feature_flag_service, get_feature_flag_service_for_write
from msls.application.services.feature_flag_service import FeatureFlagState
from msls.core.constants import FEATURE_ONLINE_ADMISSIONS, PERM_FEATURE_FLAGS_MANAGE
from msls.domain.enums import FlagSource
from tests.conftest import FakeFlagService

FLAGS = "/api/v1/feature-flags"


def _state(enabled: bool, source: FlagSource) -> FeatureFlagState:
    return FeatureFlagState(
        key=FEATURE_ONLINE_ADMISSIONS,
        name="Online admissions",
        description=None,
        enabled=enabled,
        custom_value=None,
        source=source,
    )


class _StatefulFlags(FakeFlagService):
    """Fake that also answers get_states / overrides and records calls."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple] = []

    async def get_states(self, tenant_id: str, user_id: str | None = None):
        self.calls.append(("get_states", tenant_id, user_id))
        return [_state(False, FlagSource.DEFAULT)]

    async def set_tenant_override(self, tenant_id, key, enabled, custom_value=None):
        self.calls.append(("set", tenant_id, key, enabled))
        return _state(enabled, FlagSource.TENANT)

    async def remove_tenant_override(self, tenant_id, key) -> bool:
        self.calls.append(("remove", tenant_id, key))
        return True


def _install(app) -> _StatefulFlags:
    flags = _StatefulFlags()
    app.dependency_overrides[get_feature_flag_service] = lambda: flags
    app.dependency_overrides[get_feature_flag_service_for_write] = lambda: flags
    return flags


async def test_list_states_for_signed_in_user(client: AsyncClient, app, make_token) -> None:
    flags = _install(app)
    response = await client.get(FLAGS, headers={"Authorization": f"Bearer {make_token()}"})
    assert response.status_code == 200
    assert response.json()["flags"][0] == {
        "key": FEATURE_ONLINE_ADMISSIONS,
        "name": "Online admissions",
        "description": None,
        "enabled": False,
        "custom_value": None,
        "source": "default",
    }
    assert flags.calls == [("get_states", "school-a", "user-1")]


async def test_list_states_anonymous_uses_tenant_only(client: AsyncClient, app) -> None:
    flags = _install(app)
    response = await client.get(FLAGS, headers={"X-Tenant-ID": "school-a"})
    assert response.status_code == 200
    assert flags.calls == [("get_states", "school-a", None)]


async def test_override_requires_manage_permission(client: AsyncClient, app, make_token) -> None:
    _install(app)
    response = await client.put(
        f"{FLAGS}/{FEATURE_ONLINE_ADMISSIONS}/tenant-override",
        json={"enabled": True},
        headers={"Authorization": f"Bearer {make_token()}"},
    )
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"


async def test_set_and_remove_override(client: AsyncClient, app, make_token) -> None:
    flags = _install(app)
    headers = {"Authorization": f"Bearer {make_token(permissions=[PERM_FEATURE_FLAGS_MANAGE])}"}
    url = f"{FLAGS}/{FEATURE_ONLINE_ADMISSIONS}/tenant-override"

    response = await client.put(url, json={"enabled": True}, headers=headers)
    assert response.status_code == 200
    assert response.json()["source"] == "tenant"

    response = await client.delete(url, headers=headers)
    assert response.status_code == 204
    assert ("set", "school-a", FEATURE_ONLINE_ADMISSIONS, True) in flags.calls
    assert ("remove", "school-a", FEATURE_ONLINE_ADMISSIONS) in flags.calls
