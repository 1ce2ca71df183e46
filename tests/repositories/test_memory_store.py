"""
Tests for the in-memory ledger store, including the
per-account serialization the statement service relies on.
"""

import threading
import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest

from statement_ledger.errors import InsufficientFunds, UserNotFound
from statement_ledger.models.enums import EntryType
from statement_ledger.models.statement_entry import StatementEntry
from statement_ledger.repositories import InMemoryLedgerStore


def make_entry(owner_id, entry_type=EntryType.DEPOSIT, amount=10):
    return StatementEntry(
        id=uuid.uuid4(),
        owner_id=owner_id,
        entry_type=entry_type,
        amount=amount,
        description="test",
    )


class TestReadsAndWrites:

    def test_list_by_owner_filters(self):
        store = InMemoryLedgerStore()
        alice, bob = uuid.uuid4(), uuid.uuid4()
        store.append(make_entry(alice))
        store.append(make_entry(bob))
        store.append(make_entry(alice))

        assert len(store.list_by_owner(alice)) == 2
        assert len(store.list_by_owner(bob)) == 1
        assert store.list_by_owner(uuid.uuid4()) == []

    def test_find_requires_matching_owner(self):
        store = InMemoryLedgerStore()
        alice, bob = uuid.uuid4(), uuid.uuid4()
        entry = store.append(make_entry(alice))

        assert store.find_by_owner_and_id(alice, entry.id) is entry
        assert store.find_by_owner_and_id(bob, entry.id) is None

    def test_append_pair_stores_both(self):
        store = InMemoryLedgerStore()
        alice, bob = uuid.uuid4(), uuid.uuid4()
        debit = make_entry(alice, EntryType.TRANSFER_DEBIT)
        credit = make_entry(bob, EntryType.TRANSFER_CREDIT)

        assert store.append_pair(debit, credit) == (debit, credit)
        assert store.list_by_owner(alice) == [debit]
        assert store.list_by_owner(bob) == [credit]

    def test_get_balance_folds_entries(self):
        store = InMemoryLedgerStore()
        alice = uuid.uuid4()
        store.append(make_entry(alice, EntryType.DEPOSIT, 10))
        store.append(make_entry(alice, EntryType.WITHDRAW, 3))
        assert store.get_balance(alice) == 7


class TestLocking:

    def test_locked_excludes_other_writers_on_same_account(self):
        store = InMemoryLedgerStore()
        account = uuid.uuid4()
        inside = threading.Event()
        release = threading.Event()
        order = []

        def holder():
            with store.locked([account]):
                inside.set()
                release.wait(timeout=5)
                order.append("holder")

        def waiter():
            inside.wait(timeout=5)
            with store.locked([account]):
                order.append("waiter")

        threads = [threading.Thread(target=holder), threading.Thread(target=waiter)]
        for t in threads:
            t.start()
        inside.wait(timeout=5)
        release.set()
        for t in threads:
            t.join(timeout=5)

        assert order == ["holder", "waiter"]

    def test_disjoint_accounts_do_not_block(self):
        store = InMemoryLedgerStore()
        a, b = uuid.uuid4(), uuid.uuid4()

        with store.locked([a]):
            acquired = threading.Event()

            def other():
                with store.locked([b]):
                    acquired.set()

            t = threading.Thread(target=other)
            t.start()
            assert acquired.wait(timeout=5)
            t.join(timeout=5)

    def test_duplicate_ids_do_not_self_deadlock(self):
        store = InMemoryLedgerStore()
        account = uuid.uuid4()
        with store.locked([account, account]):
            pass

    def test_account_locks_dropped_after_release(self):
        store = InMemoryLedgerStore()
        a, b = uuid.uuid4(), uuid.uuid4()
        with store.locked([a, b]):
            assert set(store._account_locks) == {a, b}
        assert store._account_locks == {}

    def test_rejected_unknown_account_leaves_no_lock(self, memory_ledger):
        with pytest.raises(UserNotFound):
            memory_ledger.service.create_withdraw(uuid.uuid4(), 10, "out")
        assert memory_ledger.store._account_locks == {}


class TestConcurrentOperations:

    def test_concurrent_withdrawals_never_overdraw(self, memory_ledger):
        user = memory_ledger.add_user()
        memory_ledger.service.create_deposit(user.id, 50, "in")

        def attempt(_):
            try:
                memory_ledger.service.create_withdraw(user.id, 10, "out")
                return True
            except InsufficientFunds:
                return False

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(attempt, range(20)))

        assert results.count(True) == 5
        assert memory_ledger.service.get_balance(user.id).balance == 0
        assert memory_ledger.store._account_locks == {}

    def test_opposing_transfers_complete(self, memory_ledger):
        alice = memory_ledger.add_user("alice")
        bob = memory_ledger.add_user("bob")
        memory_ledger.service.create_deposit(alice.id, 100, "in")
        memory_ledger.service.create_deposit(bob.id, 100, "in")

        def move(i):
            if i % 2:
                memory_ledger.service.create_transfer(alice.id, bob.id, 1, "a->b")
            else:
                memory_ledger.service.create_transfer(bob.id, alice.id, 1, "b->a")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(move, range(40)))

        alice_balance = memory_ledger.service.get_balance(alice.id).balance
        bob_balance = memory_ledger.service.get_balance(bob.id).balance
        assert alice_balance == 100
        assert bob_balance == 100
