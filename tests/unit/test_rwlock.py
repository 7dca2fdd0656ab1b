import threading
import time
import pytest
from svcat.UTILS.rwlock import ReadWriteLock


def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    lock.acquire_read()
    lock.acquire_read()
    assert lock.readers == 2
    lock.release_read()
    lock.release_read()
    assert lock.readers == 0


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    acquired = threading.Event()

    def reader():
        with lock.read_lock():
            acquired.set()

    with lock.write_lock():
        assert lock.writer_active
        t = threading.Thread(target=reader)
        t.start()
        assert not acquired.wait(0.1)
    assert acquired.wait(2)
    t.join(2)
    assert not lock.writer_active


def test_waiting_writer_goes_before_new_readers():
    lock = ReadWriteLock()
    order = []

    def writer():
        with lock.write_lock():
            order.append("writer")

    def reader():
        with lock.read_lock():
            order.append("reader")

    lock.acquire_read()
    w = threading.Thread(target=writer)
    w.start()
    assert wait_until(lambda: len(lock._writer_queue) == 1)

    r = threading.Thread(target=reader)
    r.start()
    time.sleep(0.1)
    assert order == []

    lock.release_read()
    w.join(2)
    r.join(2)
    assert order == ["writer", "reader"]


def test_writers_are_serialized():
    lock = ReadWriteLock()
    counter = {"value": 0}

    def bump():
        for _ in range(200):
            with lock.write_lock():
                current = counter["value"]
                counter["value"] = current + 1

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(5)
    assert counter["value"] == 800


def test_release_without_acquire():
    lock = ReadWriteLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()
