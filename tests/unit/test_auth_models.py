"""Unit tests for the Supabase user claims model."""

import pytest
from pydantic import ValidationError

from libs.auth.models import AuthUser


def test_blank_identifiers_become_none():
    user = AuthUser(sub="phone-user", email="", phone="15735550111")

    assert user.email is None
    assert user.phone == "15735550111"

    email_user = AuthUser(sub="email-user", email="member@example.com", phone="")
    assert email_user.phone is None


def test_malformed_email_still_rejected():
    with pytest.raises(ValidationError):
        AuthUser(sub="someone", email="not-an-email")


def test_admin_roles():
    assert AuthUser(sub="svc", role="service_role").is_admin
    assert AuthUser(sub="org", app_metadata={"role": "admin"}).is_admin
    assert not AuthUser(sub="member").is_admin
