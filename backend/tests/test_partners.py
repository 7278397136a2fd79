import pytest

from conftest import make_user
from loveslices.core.exceptions import NotFoundError, ValidationError
from loveslices.services import partners


def test_invite_code_is_generated_once(db_session):
    alice = make_user(db_session, "Alice")

    code = partners.ensure_invite_code(db_session, alice)

    assert len(code) == 12
    assert partners.ensure_invite_code(db_session, alice) == code


def test_accept_invitation_links_both_users(db_session):
    alice = make_user(db_session, "Alice")
    bob = make_user(db_session, "Bob")
    code = partners.ensure_invite_code(db_session, alice)

    partners.accept_invitation(db_session, bob, code)

    db_session.refresh(alice)
    assert bob.partner_id == alice.id
    assert alice.partner_id == bob.id


@pytest.mark.parametrize("code", ["", "   "])
def test_accept_invitation_requires_a_code(db_session, code):
    bob = make_user(db_session, "Bob")
    with pytest.raises(ValidationError):
        partners.accept_invitation(db_session, bob, code)


def test_accept_invitation_rejects_unknown_code(db_session):
    bob = make_user(db_session, "Bob")
    with pytest.raises(NotFoundError):
        partners.accept_invitation(db_session, bob, "nope")


def test_accept_invitation_rejects_self_and_taken_partners(db_session):
    alice = make_user(db_session, "Alice")
    bob = make_user(db_session, "Bob")
    carol = make_user(db_session, "Carol")
    code = partners.ensure_invite_code(db_session, alice)

    with pytest.raises(ValidationError, match="yourself"):
        partners.accept_invitation(db_session, alice, code)

    partners.accept_invitation(db_session, bob, code)
    with pytest.raises(ValidationError, match="already linked"):
        partners.accept_invitation(db_session, carol, code)


def test_disconnect_partner_clears_both_sides(db_session):
    alice = make_user(db_session, "Alice")
    bob = make_user(db_session, "Bob")
    partners.accept_invitation(db_session, bob, partners.ensure_invite_code(db_session, alice))

    partners.disconnect_partner(db_session, alice)

    db_session.refresh(bob)
    assert alice.partner_id is None
    assert bob.partner_id is None


def test_disconnect_partner_validates_state(db_session):
    alice = make_user(db_session, "Alice")
    bob = make_user(db_session, "Bob")

    with pytest.raises(ValidationError, match="not connected"):
        partners.disconnect_partner(db_session, alice)

    partners.accept_invitation(db_session, bob, partners.ensure_invite_code(db_session, alice))
    with pytest.raises(ValidationError, match="Invalid partner"):
        partners.disconnect_partner(db_session, alice, partner_id=bob.id + 100)
