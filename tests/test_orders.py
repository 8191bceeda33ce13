"""Tests for designhub.services.orders: lifecycle, routing, acceptance and attachments."""

import base64
import os
import tempfile
import unittest
from unittest.mock import patch

from designhub.core.errors import BadRequestError, ForbiddenError, NotFoundError
from designhub.models import Deliverable, Order
from designhub.services import orders, persistence
from designhub.services.storage import LocalBlobStore
from factories import make_designer, make_service, make_session_factory, make_software, make_user

MAX_BYTES = 1024


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class OrdersTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self._tmp = tempfile.TemporaryDirectory()
        self.store = LocalBlobStore(self._tmp.name)

        self.photoshop = make_software(self.db, "Adobe Photoshop", "photo")
        self.premiere = make_software(self.db, "Adobe Premiere Pro", "video")
        self.service = make_service(self.db, "Social Media Post Design", price=8000, category="photo")

        self.client = make_user(self.db, "client@example.com")
        self.designer = make_designer(self.db, "designer@example.com", [self.photoshop])
        self.rival = make_designer(self.db, "rival@example.com", [self.photoshop])
        self.video_designer = make_designer(self.db, "video@example.com", [self.premiere])
        self.admin = make_user(self.db, "admin@example.com", role="admin")

    def tearDown(self) -> None:
        self.db.close()
        self._tmp.cleanup()

    def place_order(self) -> Order:
        return orders.create_order(self.db, self.client, self.service.id, "need a poster")

    def accepted_order(self) -> Order:
        order = self.place_order()
        return orders.accept_order(self.db, self.designer, order.id)


class TestCreateOrder(OrdersTestCase):
    def test_price_is_snapshotted_from_service(self) -> None:
        order = self.place_order()
        self.assertEqual(order.status, "pending")
        self.assertIsNone(order.designer_id)
        self.assertEqual(order.price, 8000)

        self.service.price = 9500
        self.db.commit()

        self.assertEqual(orders.load_order(self.db, order.id).price, 8000)

    def test_designer_cannot_order(self) -> None:
        with self.assertRaises(ForbiddenError):
            orders.create_order(self.db, self.designer, self.service.id, "x")

    def test_inactive_or_missing_service(self) -> None:
        retired = make_service(self.db, "Retired", is_active=False)
        with self.assertRaises(NotFoundError):
            orders.create_order(self.db, self.client, retired.id, "x")
        with self.assertRaises(NotFoundError):
            orders.create_order(self.db, self.client, 999, "x")

    def test_client_listing_is_newest_first(self) -> None:
        first = self.place_order()
        second = self.place_order()
        listed = orders.list_client_orders(self.db, self.client)
        self.assertEqual([o.id for o in listed], [second.id, first.id])


class TestPendingQueue(OrdersTestCase):
    def test_matching_designer_sees_pending_order(self) -> None:
        order = self.place_order()
        queue = orders.pending_queue(self.db, self.designer)
        self.assertEqual([o.id for o in queue], [order.id])

    def test_other_category_designer_sees_nothing(self) -> None:
        self.place_order()
        self.assertEqual(orders.pending_queue(self.db, self.video_designer), [])

    def test_designer_without_software_gets_empty_queue(self) -> None:
        self.place_order()
        newcomer = make_designer(self.db, "new@example.com")
        self.assertEqual(orders.pending_queue(self.db, newcomer), [])

    def test_accepted_order_leaves_queue(self) -> None:
        self.accepted_order()
        self.assertEqual(orders.pending_queue(self.db, self.rival), [])

    def test_clients_have_no_queue(self) -> None:
        with self.assertRaises(ForbiddenError):
            orders.pending_queue(self.db, self.client)


class TestAcceptOrder(OrdersTestCase):
    def test_accept_assigns_designer(self) -> None:
        order = self.accepted_order()
        self.assertEqual(order.status, "assigned")
        self.assertEqual(order.designer_id, self.designer.id)
        self.assertEqual([o.id for o in orders.designer_orders(self.db, self.designer)], [order.id])

    def test_second_accept_fails_and_keeps_first_designer(self) -> None:
        order = self.accepted_order()
        with self.assertRaises(BadRequestError) as ctx:
            orders.accept_order(self.db, self.rival, order.id)
        self.assertEqual(ctx.exception.message, "Order already assigned")
        self.assertEqual(orders.load_order(self.db, order.id).designer_id, self.designer.id)

    def test_client_cannot_accept(self) -> None:
        order = self.place_order()
        with self.assertRaises(ForbiddenError):
            orders.accept_order(self.db, self.client, order.id)

    def test_missing_order(self) -> None:
        with self.assertRaises(NotFoundError):
            orders.accept_order(self.db, self.designer, 999)


class TestAssignDesigner(OrdersTestCase):
    def test_admin_assigns_and_reassigns(self) -> None:
        order = self.place_order()
        order = orders.assign_designer(self.db, self.admin, order.id, self.designer.id)
        self.assertEqual((order.status, order.designer_id), ("assigned", self.designer.id))
        order = orders.assign_designer(self.db, self.admin, order.id, self.rival.id)
        self.assertEqual(order.designer_id, self.rival.id)

    def test_assignee_must_be_designer(self) -> None:
        order = self.place_order()
        with self.assertRaises(BadRequestError):
            orders.assign_designer(self.db, self.admin, order.id, self.client.id)

    def test_not_after_work_started(self) -> None:
        order = self.accepted_order()
        orders.update_status(self.db, self.designer, order.id, "in_progress")
        with self.assertRaises(BadRequestError):
            orders.assign_designer(self.db, self.admin, order.id, self.rival.id)

    def test_non_admin_forbidden(self) -> None:
        order = self.place_order()
        with self.assertRaises(ForbiddenError):
            orders.assign_designer(self.db, self.designer, order.id, self.designer.id)


class TestUpdateStatus(OrdersTestCase):
    def test_designer_moves_order_through_lifecycle(self) -> None:
        order = self.accepted_order()
        order = orders.update_status(self.db, self.designer, order.id, "in_progress")
        self.assertEqual(order.status, "in_progress")
        self.assertIsNone(order.completed_at)
        order = orders.update_status(self.db, self.designer, order.id, "completed")
        self.assertEqual(order.status, "completed")
        self.assertIsNotNone(order.completed_at)

    def test_illegal_transitions_rejected(self) -> None:
        order = self.accepted_order()
        with self.assertRaises(BadRequestError):
            orders.update_status(self.db, self.designer, order.id, "completed")
        with self.assertRaises(BadRequestError):
            orders.update_status(self.db, self.designer, order.id, "pending")
        with self.assertRaises(BadRequestError):
            orders.update_status(self.db, self.designer, order.id, "assigned")

    def test_terminal_orders_do_not_move(self) -> None:
        order = self.accepted_order()
        orders.update_status(self.db, self.designer, order.id, "cancelled")
        with self.assertRaises(BadRequestError):
            orders.update_status(self.db, self.designer, order.id, "in_progress")

    def test_client_cancels_only_pending(self) -> None:
        pending = self.place_order()
        self.assertEqual(orders.update_status(self.db, self.client, pending.id, "cancelled").status, "cancelled")

        assigned = self.accepted_order()
        with self.assertRaises(BadRequestError):
            orders.update_status(self.db, self.client, assigned.id, "cancelled")

    def test_client_cannot_start_work(self) -> None:
        order = self.accepted_order()
        with self.assertRaises(ForbiddenError):
            orders.update_status(self.db, self.client, order.id, "in_progress")

    def test_assignment_statuses_checked_after_access(self) -> None:
        order = self.accepted_order()
        for caller, status in ((self.rival, "assigned"), (self.client, "pending")):
            with self.assertRaises(ForbiddenError):
                orders.update_status(self.db, caller, order.id, status)

    def test_unassigned_designer_forbidden(self) -> None:
        order = self.accepted_order()
        with self.assertRaises(ForbiddenError):
            orders.update_status(self.db, self.rival, order.id, "in_progress")

    def test_admin_may_cancel_in_progress(self) -> None:
        order = self.accepted_order()
        orders.update_status(self.db, self.designer, order.id, "in_progress")
        self.assertEqual(orders.update_status(self.db, self.admin, order.id, "cancelled").status, "cancelled")


class TestDeliverables(OrdersTestCase):
    def test_upload_completes_order(self) -> None:
        order = self.accepted_order()
        row = orders.upload_deliverable(
            self.db, self.store, self.designer, order.id,
            file_name="final.png", file_data=b64(b"final poster"), file_type="image/png",
            max_bytes=MAX_BYTES,
        )
        order = orders.load_order(self.db, order.id)
        self.assertEqual(order.status, "completed")
        self.assertIsNotNone(order.completed_at)
        self.assertTrue(row.file_url.startswith("file://"))

        _, data = orders.read_deliverable(self.db, self.store, self.client, order.id, row.id)
        self.assertEqual(data, b"final poster")

    def test_second_upload_rejected(self) -> None:
        order = self.accepted_order()
        kwargs = dict(file_name="final.png", file_data=b64(b"v1"), file_type=None, max_bytes=MAX_BYTES)
        orders.upload_deliverable(self.db, self.store, self.designer, order.id, **kwargs)
        with self.assertRaises(BadRequestError):
            orders.upload_deliverable(self.db, self.store, self.designer, order.id, **kwargs)
        self.assertEqual(self.db.query(Deliverable).filter(Deliverable.order_id == order.id).count(), 1)

    def test_only_assigned_designer_uploads(self) -> None:
        order = self.accepted_order()
        with self.assertRaises(ForbiddenError):
            orders.upload_deliverable(
                self.db, self.store, self.rival, order.id,
                file_name="x.png", file_data=b64(b"x"), file_type=None, max_bytes=MAX_BYTES,
            )

    def test_cancelled_order_rejects_deliverable(self) -> None:
        order = self.accepted_order()
        orders.update_status(self.db, self.designer, order.id, "cancelled")
        with self.assertRaises(BadRequestError):
            orders.upload_deliverable(
                self.db, self.store, self.designer, order.id,
                file_name="x.png", file_data=b64(b"x"), file_type=None, max_bytes=MAX_BYTES,
            )


class TestOrderFiles(OrdersTestCase):
    def test_client_uploads_and_designer_reads(self) -> None:
        order = self.accepted_order()
        row = orders.upload_order_file(
            self.db, self.store, self.client, order.id,
            file_name="brief.pdf", file_data="data:application/pdf;base64," + b64(b"%PDF"),
            file_type="application/pdf", max_bytes=MAX_BYTES,
        )
        self.assertEqual(row.uploaded_by, self.client.id)
        self.assertTrue(row.file_key.startswith(f"orders/{order.id}/files/"))

        _, data = orders.read_order_file(self.db, self.store, self.designer, order.id, row.id)
        self.assertEqual(data, b"%PDF")

        detail = orders.get_order_detail(self.db, self.designer, order.id)
        self.assertEqual([f.id for f in detail["files"]], [row.id])

    def test_designer_cannot_attach_reference_files(self) -> None:
        order = self.accepted_order()
        with self.assertRaises(ForbiddenError):
            orders.upload_order_file(
                self.db, self.store, self.designer, order.id,
                file_name="x.png", file_data=b64(b"x"), file_type=None, max_bytes=MAX_BYTES,
            )

    def test_stranger_cannot_read_detail(self) -> None:
        order = self.accepted_order()
        with self.assertRaises(ForbiddenError):
            orders.get_order_detail(self.db, self.rival, order.id)


class TestUploadHelpers(unittest.TestCase):
    def test_decode_accepts_data_url(self) -> None:
        self.assertEqual(orders.decode_file_data("data:image/png;base64," + b64(b"abc"), 10), b"abc")

    def test_decode_rejects_bad_input(self) -> None:
        for payload in ("not base64!", "", b64(b"x" * 11)):
            with self.assertRaises(BadRequestError):
                orders.decode_file_data(payload, 10)

    def test_oversized_payload_rejected_before_decoding(self) -> None:
        with patch.object(orders.base64, "b64decode") as decode:
            with self.assertRaises(BadRequestError):
                orders.decode_file_data(b64(b"x" * 11), 10)
        decode.assert_not_called()

    def test_payload_at_the_limit_is_accepted(self) -> None:
        self.assertEqual(orders.decode_file_data(b64(b"x" * 10), 10), b"x" * 10)

    def test_storage_key_sanitizes_name(self) -> None:
        key = orders.storage_key(5, "deliverables", "../evil name.png")
        self.assertTrue(key.startswith("orders/5/deliverables/"))
        self.assertTrue(key.endswith("-evil_name.png"))
        self.assertNotIn("..", key)

    def test_transition_table(self) -> None:
        self.assertTrue(orders.can_transition("pending", "assigned"))
        self.assertTrue(orders.can_transition("in_progress", "completed"))
        self.assertFalse(orders.can_transition("pending", "completed"))
        self.assertFalse(orders.can_transition("completed", "cancelled"))
        self.assertFalse(orders.can_transition("cancelled", "pending"))


class TestConcurrentAccept(unittest.TestCase):
    """Two designers on separate connections both read the order as pending, then accept."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.Session = make_session_factory(os.path.join(self._tmp.name, "marketplace.db"))
        with self.Session() as db:
            photoshop = make_software(db)
            service = make_service(db)
            client = make_user(db, "client@example.com")
            self.first_id = make_designer(db, "first@example.com", [photoshop]).id
            self.second_id = make_designer(db, "second@example.com", [photoshop]).id
            self.order_id = orders.create_order(db, client, service.id, "need a poster").id

        self.db_a = self.Session()
        self.db_b = self.Session()
        self.first = persistence.get_user_by_id(self.db_a, self.first_id)
        self.second = persistence.get_user_by_id(self.db_b, self.second_id)
        self.assertEqual(orders.load_order(self.db_a, self.order_id).status, "pending")
        self.stale = orders.load_order(self.db_b, self.order_id)
        self.assertEqual(self.stale.status, "pending")

    def tearDown(self) -> None:
        self.db_a.close()
        self.db_b.close()
        self.Session.kw["bind"].dispose()
        self._tmp.cleanup()

    def assert_first_designer_kept(self) -> None:
        with self.Session() as db:
            order = orders.load_order(db, self.order_id)
            self.assertEqual((order.status, order.designer_id), ("assigned", self.first_id))

    def test_second_accept_rejected(self) -> None:
        orders.accept_order(self.db_a, self.first, self.order_id)
        with self.assertRaises(BadRequestError) as ctx:
            orders.accept_order(self.db_b, self.second, self.order_id)
        self.assertEqual(ctx.exception.message, "Order already assigned")
        self.assert_first_designer_kept()

    def test_update_predicate_rejects_stale_pending_read(self) -> None:
        orders.accept_order(self.db_a, self.first, self.order_id)
        # Session B keeps believing the order is pending; only the guarded UPDATE can refuse.
        with patch.object(orders, "load_order", return_value=self.stale):
            with self.assertRaises(BadRequestError):
                orders.accept_order(self.db_b, self.second, self.order_id)
        self.assert_first_designer_kept()
