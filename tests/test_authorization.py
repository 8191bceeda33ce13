"""Unit tests for designhub.services.authorization: the single capability predicate."""

import unittest
from types import SimpleNamespace

from designhub.core.errors import ForbiddenError
from designhub.services.authorization import Capability, authorize, is_allowed

CLIENT = SimpleNamespace(id=1, role="user", user_type="client")
DESIGNER = SimpleNamespace(id=2, role="user", user_type="designer")
OTHER_DESIGNER = SimpleNamespace(id=3, role="user", user_type="designer")
OTHER_CLIENT = SimpleNamespace(id=4, role="user", user_type="client")
ADMIN = SimpleNamespace(id=5, role="admin", user_type="client")

PENDING = SimpleNamespace(client_id=1, designer_id=None)
ASSIGNED = SimpleNamespace(client_id=1, designer_id=2)


class TestOrderVisibility(unittest.TestCase):
    def test_parties_can_view_and_message(self) -> None:
        for caller in (CLIENT, DESIGNER):
            self.assertTrue(is_allowed(caller, Capability.VIEW_ORDER, ASSIGNED))
            self.assertTrue(is_allowed(caller, Capability.MESSAGE_ORDER, ASSIGNED))

    def test_strangers_cannot_view(self) -> None:
        for caller in (OTHER_DESIGNER, OTHER_CLIENT):
            self.assertFalse(is_allowed(caller, Capability.VIEW_ORDER, ASSIGNED))

    def test_unassigned_order_is_not_visible_to_designers(self) -> None:
        self.assertTrue(is_allowed(CLIENT, Capability.VIEW_ORDER, PENDING))
        self.assertFalse(is_allowed(DESIGNER, Capability.VIEW_ORDER, PENDING))


class TestOrderMutations(unittest.TestCase):
    def test_only_client_uploads_reference_files(self) -> None:
        self.assertTrue(is_allowed(CLIENT, Capability.UPLOAD_ORDER_FILE, ASSIGNED))
        self.assertFalse(is_allowed(DESIGNER, Capability.UPLOAD_ORDER_FILE, ASSIGNED))

    def test_status_updates_by_assigned_designer_or_admin(self) -> None:
        self.assertTrue(is_allowed(DESIGNER, Capability.UPDATE_ORDER_STATUS, ASSIGNED))
        self.assertTrue(is_allowed(ADMIN, Capability.UPDATE_ORDER_STATUS, ASSIGNED))
        self.assertFalse(is_allowed(CLIENT, Capability.UPDATE_ORDER_STATUS, ASSIGNED))
        self.assertFalse(is_allowed(OTHER_DESIGNER, Capability.UPDATE_ORDER_STATUS, ASSIGNED))

    def test_cancel_by_party_or_admin(self) -> None:
        self.assertTrue(is_allowed(CLIENT, Capability.CANCEL_ORDER, PENDING))
        self.assertTrue(is_allowed(ADMIN, Capability.CANCEL_ORDER, PENDING))
        self.assertFalse(is_allowed(OTHER_CLIENT, Capability.CANCEL_ORDER, PENDING))

    def test_deliverable_requires_assigned_designer(self) -> None:
        self.assertTrue(is_allowed(DESIGNER, Capability.UPLOAD_DELIVERABLE, ASSIGNED))
        self.assertFalse(is_allowed(ADMIN, Capability.UPLOAD_DELIVERABLE, ASSIGNED))
        self.assertFalse(is_allowed(OTHER_DESIGNER, Capability.UPLOAD_DELIVERABLE, ASSIGNED))
        self.assertFalse(is_allowed(DESIGNER, Capability.UPLOAD_DELIVERABLE, PENDING))

    def test_order_scoped_capability_needs_an_order(self) -> None:
        with self.assertRaises(ValueError):
            is_allowed(CLIENT, Capability.VIEW_ORDER)


class TestRoleCapabilities(unittest.TestCase):
    def test_designer_queue_and_accept(self) -> None:
        for capability in (
            Capability.ACCEPT_ORDER,
            Capability.VIEW_PENDING_QUEUE,
            Capability.VIEW_ASSIGNED_ORDERS,
        ):
            self.assertTrue(is_allowed(DESIGNER, capability))
            self.assertFalse(is_allowed(CLIENT, capability))

    def test_clients_place_orders_and_manage_cards(self) -> None:
        for capability in (Capability.CREATE_ORDER, Capability.MANAGE_PAYMENT_METHODS):
            self.assertTrue(is_allowed(CLIENT, capability))
            self.assertFalse(is_allowed(DESIGNER, capability))

    def test_assign_is_admin_only(self) -> None:
        self.assertTrue(is_allowed(ADMIN, Capability.ASSIGN_DESIGNER))
        self.assertFalse(is_allowed(DESIGNER, Capability.ASSIGN_DESIGNER))


class TestAuthorize(unittest.TestCase):
    def test_raises_forbidden_with_reason(self) -> None:
        with self.assertRaises(ForbiddenError) as ctx:
            authorize(DESIGNER, Capability.CREATE_ORDER)
        self.assertEqual(ctx.exception.status_code, 403)
        self.assertIn("clients", ctx.exception.message)

    def test_allowed_returns_none(self) -> None:
        self.assertIsNone(authorize(CLIENT, Capability.VIEW_ORDER, ASSIGNED))
