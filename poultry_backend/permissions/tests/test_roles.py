from types import SimpleNamespace

from django.contrib.auth.models import AnonymousUser
from django.test import SimpleTestCase

from finance.services.exceptions import ForbiddenError
from permissions.roles import (
    ALL_CAPABILITIES,
    CAP_LEDGER_OPERATE,
    ROLE_ADMIN,
    ROLE_OWNER,
    ROLE_STAFF,
    HasCapability,
    actor_display_name,
    assert_ledger_access,
    effective_capabilities_for,
)


def _user(role, **extra):
    return SimpleNamespace(role=role, is_authenticated=True, **extra)


class CapabilityMapTests(SimpleTestCase):
    def test_ledger_roles_hold_every_capability(self):
        for role in (ROLE_ADMIN, ROLE_OWNER):
            self.assertEqual(effective_capabilities_for(_user(role)), ALL_CAPABILITIES)

    def test_staff_holds_nothing(self):
        self.assertEqual(effective_capabilities_for(_user(ROLE_STAFF)), set())

    def test_unknown_or_anonymous(self):
        self.assertEqual(effective_capabilities_for(_user("driver")), set())
        self.assertEqual(effective_capabilities_for(AnonymousUser()), set())


class HasCapabilityTests(SimpleTestCase):
    def _check(self, user, capability=CAP_LEDGER_OPERATE):
        request = SimpleNamespace(user=user)
        view = SimpleNamespace(required_capability=capability)
        return HasCapability().has_permission(request, view)

    def test_owner_allowed(self):
        self.assertTrue(self._check(_user(ROLE_OWNER)))

    def test_staff_denied(self):
        self.assertFalse(self._check(_user(ROLE_STAFF)))

    def test_anonymous_denied(self):
        self.assertFalse(self._check(AnonymousUser()))

    def test_view_without_capability_is_denied(self):
        self.assertFalse(self._check(_user(ROLE_ADMIN), capability=None))


class AssertLedgerAccessTests(SimpleTestCase):
    def test_admin_and_owner_pass(self):
        assert_ledger_access(_user(ROLE_ADMIN))
        assert_ledger_access(_user(ROLE_OWNER))

    def test_staff_is_forbidden(self):
        with self.assertRaises(ForbiddenError):
            assert_ledger_access(_user(ROLE_STAFF))

    def test_missing_actor_is_forbidden(self):
        with self.assertRaises(ForbiddenError):
            assert_ledger_access(None)
        with self.assertRaises(ForbiddenError):
            assert_ledger_access(AnonymousUser())


class ActorDisplayNameTests(SimpleTestCase):
    def test_prefers_full_name(self):
        actor = _user(ROLE_ADMIN, first_name="Ada", last_name="Obi", email="a@x.com")
        self.assertEqual(actor_display_name(actor), "Ada Obi")

    def test_falls_back_to_email(self):
        actor = _user(ROLE_ADMIN, first_name="", last_name="", username=None, email="a@x.com")
        self.assertEqual(actor_display_name(actor), "a@x.com")

    def test_none(self):
        self.assertEqual(actor_display_name(None), "")
