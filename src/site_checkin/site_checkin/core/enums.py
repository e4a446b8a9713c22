from __future__ import annotations

from enum import Enum


class SiteRole(str, Enum):
    """Role a principal holds on a single site.

    Any grant lets the principal administer the site (scan, roster, edit).
    Only ADMIN may invite or revoke other principals.
    """

    ADMIN = "admin"
    SUPERVISOR = "supervisor"


class SignOutMethod(str, Enum):
    """How an attendance record was closed."""

    MANUAL = "manual"
    AUTO = "auto"


class ScanStatus(str, Enum):
    """Result of presenting a credential at a site terminal."""

    ACCEPTED = "accepted"
    DUPLICATE = "duplicate"
