from __future__ import annotations

import threading

import pytest

from src.site_checkin.site_checkin.core.enums import SiteRole
from src.site_checkin.site_checkin.core.exceptions import (
    ConflictingGrant,
    InvalidInput,
    LastAdmin,
    NotAuthorized,
    NotFound,
    SiteNotFound,
)


def test_creator_is_admin_of_own_site_only(container, admin_id, site):
    other = container.site_registry.create(creator_id="someone-else", name="Tower B")

    assert container.directory.is_admin(admin_id, site.site_id)
    assert not container.directory.is_admin(admin_id, other.site_id)
    assert not container.directory.is_admin("stranger", site.site_id)
    assert not container.directory.is_admin("", site.site_id)


def test_grant_is_idempotent_for_same_role(container, site):
    first = container.directory.grant(site_id=site.site_id, principal_id="p-2", role=SiteRole.SUPERVISOR)
    again = container.directory.grant(site_id=site.site_id, principal_id="p-2", role="supervisor")

    assert again == first
    assert len(container.directory.grants_for("p-2")) == 1


def test_grant_with_different_role_conflicts_and_keeps_existing(container, site):
    container.directory.grant(site_id=site.site_id, principal_id="p-2", role=SiteRole.SUPERVISOR)

    with pytest.raises(ConflictingGrant):
        container.directory.grant(site_id=site.site_id, principal_id="p-2", role=SiteRole.ADMIN)

    assert container.directory.role_on("p-2", site.site_id) == SiteRole.SUPERVISOR


def test_grant_rejects_unknown_role(container, site):
    with pytest.raises(InvalidInput):
        container.directory.grant(site_id=site.site_id, principal_id="p-2", role="owner")


def test_concurrent_identical_grants_store_one_grant(container, db, site):
    barrier = threading.Barrier(8)
    results = []

    def grant():
        barrier.wait()
        results.append(container.directory.grant(site_id=site.site_id, principal_id="p-2", role=SiteRole.SUPERVISOR))

    threads = [threading.Thread(target=grant) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert {r.role for r in results} == {SiteRole.SUPERVISOR}
    assert len([g for g in db.grants.values() if g.principal_id == "p-2"]) == 1


def test_invite_defaults_to_supervisor_and_grants_scan_rights(container, admin_id, site):
    grant = container.directory.invite(caller_id=admin_id, site_id=site.site_id, principal_id="p-2")

    assert grant.role == SiteRole.SUPERVISOR
    assert container.directory.is_admin("p-2", site.site_id)


def test_supervisor_cannot_invite_or_revoke(container, admin_id, site):
    container.directory.invite(caller_id=admin_id, site_id=site.site_id, principal_id="p-2")

    with pytest.raises(NotAuthorized):
        container.directory.invite(caller_id="p-2", site_id=site.site_id, principal_id="p-3")
    with pytest.raises(NotAuthorized):
        container.directory.revoke(caller_id="p-2", site_id=site.site_id, principal_id=admin_id)


def test_revoke_takes_effect_immediately(container, admin_id, site):
    container.directory.invite(caller_id=admin_id, site_id=site.site_id, principal_id="p-2")

    container.directory.revoke(caller_id=admin_id, site_id=site.site_id, principal_id="p-2")

    assert not container.directory.is_admin("p-2", site.site_id)


def test_revoke_refuses_last_admin(container, admin_id, site):
    with pytest.raises(LastAdmin):
        container.directory.revoke(caller_id=admin_id, site_id=site.site_id, principal_id=admin_id)

    assert container.directory.is_admin(admin_id, site.site_id)


def test_admin_can_step_down_when_another_admin_remains(container, admin_id, site):
    container.directory.invite(caller_id=admin_id, site_id=site.site_id, principal_id="p-2", role="admin")

    container.directory.revoke(caller_id=admin_id, site_id=site.site_id, principal_id=admin_id)

    assert not container.directory.is_admin(admin_id, site.site_id)
    assert container.directory.role_on("p-2", site.site_id) == SiteRole.ADMIN


def test_revoke_missing_grant(container, admin_id, site):
    with pytest.raises(NotFound):
        container.directory.revoke(caller_id=admin_id, site_id=site.site_id, principal_id="p-9")


def test_list_for_site_requires_admin(container, admin_id, site):
    grants = container.directory.list_for_site(caller_id=admin_id, site_id=site.site_id)

    assert [g.principal_id for g in grants] == [admin_id]
    with pytest.raises(NotAuthorized):
        container.directory.list_for_site(caller_id="stranger", site_id=site.site_id)


def test_grant_on_unknown_site_is_site_not_found(container, db):
    with pytest.raises(SiteNotFound):
        container.directory.grant(site_id="missing-site", principal_id="p-2")

    assert db.grants == {}
