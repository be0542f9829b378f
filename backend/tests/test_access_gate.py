"""
Unit tests for the access gate: who sees which profile fields.
"""
import pytest

from bureau.models.profile import Profile
from bureau.services.access_gate import (
    PUBLIC_FIELDS, AccessLevel, public_fields, resolve_access_level, resolve_visible_fields,
)
from bureau.services.access_ledger import AccessLedger

PREMIUM_FIELDS = ("phone_number", "whatsapp_number", "caste", "gotra", "religion", "father_name", "income", "rashi")


@pytest.fixture
def owner(make_user):
    return make_user()


@pytest.fixture
def profile(make_profile, owner):
    return make_profile(owner)


def assert_restricted(fields):
    assert set(fields) == set(PUBLIC_FIELDS) | {"has_restricted_access", "restricted_fields"}
    assert fields["has_restricted_access"] is True
    for name in PREMIUM_FIELDS:
        assert name not in fields
        assert name in fields["restricted_fields"]


def assert_full(fields):
    assert fields["has_restricted_access"] is False
    assert fields["phone_number"] == "9123456780"
    assert fields["caste"] == "Agarwal"
    assert fields["partner_age_max"] == 32


def test_anonymous_viewer_gets_public_fields_only(db, profile):
    decision = resolve_visible_fields(db, None, profile)
    assert decision.access_level == AccessLevel.NONE
    assert decision.has_full_access is False
    assert_restricted(decision.fields)
    assert decision.fields["name"] == "Asha Verma"
    assert decision.fields["completion_percentage"] == profile.completion_percentage


def test_owner_sees_everything(db, owner, profile):
    decision = resolve_visible_fields(db, owner, profile)
    assert decision.access_level == AccessLevel.OWNER
    assert_full(decision.fields)


def test_admin_sees_everything(db, admin, profile):
    decision = resolve_visible_fields(db, admin, profile)
    assert decision.access_level == AccessLevel.ADMIN
    assert_full(decision.fields)


def test_admin_who_owns_the_listing_is_owner(db, admin, make_profile):
    listing = make_profile(admin, created_by_admin=True)
    assert resolve_access_level(db, admin, listing) == AccessLevel.OWNER


def test_other_member_without_claim_is_restricted(db, make_user, profile):
    decision = resolve_visible_fields(db, make_user(), profile)
    assert decision.access_level == AccessLevel.NONE
    assert_restricted(decision.fields)


@pytest.mark.parametrize("outcome", [None, "rejected"])
def test_unapproved_claim_does_not_open_profile(db, make_user, profile, admin, outcome):
    viewer = make_user()
    claim = AccessLedger.submit_claim(db, viewer, profile.id, "GATEUTR000001", 500, "UPI")
    if outcome:
        AccessLedger.decide(db, claim.id, outcome, admin)
    assert resolve_visible_fields(db, viewer, profile).access_level == AccessLevel.NONE


def test_approved_claim_opens_only_that_profile(db, make_user, make_profile, owner, profile, admin):
    viewer = make_user()
    other = make_profile(owner, name="Meera Joshi")
    claim = AccessLedger.submit_claim(db, viewer, profile.id, "GATEUTR000001", 500, "UPI")
    AccessLedger.decide(db, claim.id, "approved", admin)

    paid = resolve_visible_fields(db, viewer, profile)
    assert paid.access_level == AccessLevel.PAID
    assert_full(paid.fields)
    assert resolve_visible_fields(db, viewer, other).access_level == AccessLevel.NONE


def test_decision_is_reevaluated_on_every_read(db, make_user, profile, admin):
    viewer = make_user()
    assert resolve_visible_fields(db, viewer, profile).access_level == AccessLevel.NONE

    claim = AccessLedger.submit_claim(db, viewer, profile.id, "GATEUTR000001", 500, "UPI")
    AccessLedger.decide(db, claim.id, "approved", admin)
    assert resolve_visible_fields(db, viewer, profile).access_level == AccessLevel.PAID


def test_new_columns_stay_hidden_until_allow_listed(profile):
    """Anything not on the allow-list is withheld, including columns added later."""
    full = profile.to_full_dict()
    restricted = public_fields(profile)
    hidden = set(full) - set(PUBLIC_FIELDS)
    assert hidden
    assert not hidden & set(restricted)
    for column in Profile.__table__.columns:
        if column.name not in PUBLIC_FIELDS:
            assert column.name not in restricted


def test_internal_columns_never_leave_the_service(db, owner, make_profile):
    profile = make_profile(owner, image_url="https://assets.test/profiles/a.png", image_key="profiles/a.png")
    assert "image_key" not in resolve_visible_fields(db, owner, profile).fields
    assert "image_key" not in public_fields(profile)["restricted_fields"]
