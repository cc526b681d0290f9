"""Concurrent movements against the same balance.

Each worker uses its own session (and connection) on a shared file database.
"""

import threading

from models.operation import Operation, OperationType
from models.product import Product
from services.balance import get_balance
from services.exceptions import InsufficientStock
from services.movement import MoveRequest, record_movement
from tests.helpers import receive


def _run_workers(session_factory, count, target):
    barrier = threading.Barrier(count)
    outcomes = []
    lock = threading.Lock()

    def worker():
        session = session_factory()
        try:
            barrier.wait()
            target(session)
            result = "ok"
        except InsufficientStock:
            result = "insufficient"
        except Exception as e:  # surfaced through the outcome list
            result = repr(e)
        finally:
            session.close()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return outcomes


def test_concurrent_deliveries_never_overdraw(session_factory, seed):
    with session_factory() as session:
        receive(session, seed, 4)

    def deliver_one(session):
        record_movement(session, MoveRequest(
            quantity=1, type=OperationType.DELIVERY, product_id=seed.product_id,
            source_location_id=seed.shelf_id, destination_location_id=seed.customer_id,
        ))

    outcomes = _run_workers(session_factory, 5, deliver_one)

    assert sorted(outcomes) == ["insufficient", "ok", "ok", "ok", "ok"]
    with session_factory() as session:
        assert get_balance(session, seed.product_id, seed.shelf_id) == 0
        assert get_balance(session, seed.product_id, seed.customer_id) == 4
        assert session.get(Product, seed.product_id).on_hand == 0
        assert session.query(Operation).filter(Operation.type == OperationType.DELIVERY).count() == 4


def test_concurrent_receipts_all_counted(session_factory, seed):
    def receive_two(session):
        receive(session, seed, 2, location_id=seed.bin_id)

    outcomes = _run_workers(session_factory, 6, receive_two)

    assert outcomes == ["ok"] * 6
    with session_factory() as session:
        assert get_balance(session, seed.product_id, seed.bin_id) == 12
        assert session.get(Product, seed.product_id).on_hand == 12
