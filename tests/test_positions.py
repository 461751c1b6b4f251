import threading
import time

from chainflow.node import Node
from chainflow.positions import PositionStore, RWLock


def test_get_missing_key():
    assert PositionStore().get("1") == (None, False)


def test_set_get_delete():
    store = PositionStore()
    node = Node("a")
    store.set("1", node)
    assert store.get("1") == (node, True)
    assert "1" in store
    store.delete("1")
    assert store.get("1") == (None, False)
    assert len(store) == 0


def test_none_position_is_distinct_from_absent():
    store = PositionStore()
    store.set("1", None)
    assert store.get("1") == (None, True)
    assert "1" in store


def test_delete_missing_key_is_noop():
    store = PositionStore()
    store.delete("nobody")
    assert len(store) == 0


def test_snapshot_is_a_copy():
    store = PositionStore()
    store.set("1", Node("a"))
    snap = store.snapshot()
    store.clear()
    assert list(snap) == ["1"]
    assert len(store) == 0


def test_concurrent_access_stays_consistent():
    store = PositionStore()
    nodes = [Node(str(i)) for i in range(4)]
    errors = []

    def worker(wid):
        try:
            for i in range(300):
                key = f"{wid}:{i % 10}"
                store.set(key, nodes[i % 4])
                node, ok = store.get(key)
                assert ok and node in nodes
                if i % 3 == 0:
                    store.delete(key)
        except Exception as exc:  # noqa: BLE001
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(w,)) for w in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert all(isinstance(k, str) for k in store.snapshot())
    assert len(store) <= 8 * 10


def test_writer_waits_for_readers():
    lock = RWLock()
    written = threading.Event()

    def writer():
        with lock.write():
            written.set()

    with lock.read():
        t = threading.Thread(target=writer)
        t.start()
        time.sleep(0.05)
        assert not written.is_set()
    t.join(timeout=1)
    assert written.is_set()


def test_readers_share_the_lock():
    lock = RWLock()
    inside = threading.Event()

    def reader():
        with lock.read():
            inside.set()

    with lock.read():
        t = threading.Thread(target=reader)
        t.start()
        assert inside.wait(timeout=1)
    t.join(timeout=1)
