from __future__ import annotations

from datetime import time

import pytest

from src.site_checkin.site_checkin.core.enums import SiteRole
from src.site_checkin.site_checkin.core.exceptions import InvalidCutoff, InvalidInput, NotAuthorized, SiteNotFound


def test_create_grants_creator_admin_with_default_cutoff(container, db, admin_id):
    site = container.site_registry.create(creator_id=admin_id, name="Tower A")

    assert site.auto_signout_time == time(18, 0, 0)
    assert site.created_by == admin_id
    assert container.directory.role_on(admin_id, site.site_id) == SiteRole.ADMIN
    assert [g.principal_id for g in db.grants.values() if g.site_id == site.site_id] == [admin_id]


def test_create_accepts_hh_mm_cutoff(container, admin_id):
    site = container.site_registry.create(creator_id=admin_id, name="Tower A", cutoff="17:30")

    assert site.auto_signout_time == time(17, 30)


@pytest.mark.parametrize("cutoff", ["25:00", "18h", "", "not a time"])
def test_create_rejects_invalid_cutoff_without_creating(container, db, admin_id, cutoff):
    with pytest.raises(InvalidCutoff):
        container.site_registry.create(creator_id=admin_id, name="Tower A", cutoff=cutoff)

    assert db.sites == {}
    assert db.grants == {}


def test_create_requires_name(container, admin_id):
    with pytest.raises(InvalidInput):
        container.site_registry.create(creator_id=admin_id, name="  ")


def test_update_changes_given_fields_only(container, admin_id, site):
    updated = container.site_registry.update(caller_id=admin_id, site_id=site.site_id, cutoff="16:45:00")

    assert updated.auto_signout_time == time(16, 45)
    assert updated.name == site.name
    assert updated.address == site.address
    assert container.site_registry.get(site.site_id) == updated


def test_update_can_clear_address(container, admin_id, site):
    updated = container.site_registry.update(caller_id=admin_id, site_id=site.site_id, address="")

    assert updated.address is None


def test_update_requires_admin(container, site):
    with pytest.raises(NotAuthorized):
        container.site_registry.update(caller_id="stranger", site_id=site.site_id, name="Renamed")


def test_update_rejects_invalid_cutoff_and_keeps_old(container, admin_id, site):
    with pytest.raises(InvalidCutoff):
        container.site_registry.update(caller_id=admin_id, site_id=site.site_id, cutoff="24:00")

    assert container.site_registry.get(site.site_id).auto_signout_time == time(18, 0)


def test_get_unknown_site(container):
    with pytest.raises(SiteNotFound):
        container.site_registry.get("missing")


def test_get_for_requires_admin(container, admin_id, site):
    assert container.site_registry.get_for(caller_id=admin_id, site_id=site.site_id) == site
    with pytest.raises(NotAuthorized):
        container.site_registry.get_for(caller_id="stranger", site_id=site.site_id)


def test_list_for_returns_only_administered_sites(container, admin_id, site):
    container.site_registry.create(creator_id="someone-else", name="Tower B")

    assert [s.site_id for s in container.site_registry.list_for(admin_id)] == [site.site_id]
    assert len(container.site_registry.list_all()) == 2
