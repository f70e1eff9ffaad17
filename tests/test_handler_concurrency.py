from __future__ import annotations

import logging
import threading

import pytest

from sentry_log_handler import SentryHandler, StartState
from sentry_log_handler.client import EventClient, register_factory
from sentry_log_handler.client import factory as factory_module

DSN = "https://pub@sentry.example.com/1"


@pytest.fixture(autouse=True)
def _no_entry_points(monkeypatch) -> None:
    monkeypatch.setattr(factory_module, "entry_points", lambda group: [])


def test_concurrent_first_publish_builds_one_client(connection, make_record) -> None:
    constructions: list[int] = []
    entered = threading.Event()
    release = threading.Event()

    def slow_factory(dsn):
        constructions.append(threading.get_ident())
        entered.set()
        assert release.wait(timeout=5)
        return EventClient(connection)

    register_factory("slow", slow_factory)
    handler = SentryHandler(dsn=DSN, client_factory="slow")

    first = threading.Thread(target=handler.publish, args=(make_record("one"),))
    first.start()
    assert entered.wait(timeout=5)

    second = threading.Thread(target=handler.publish, args=(make_record("two"),))
    second.start()
    release.set()
    first.join(timeout=5)
    second.join(timeout=5)

    assert len(constructions) == 1
    assert sorted(e.message for e in connection.events) == ["one", "two"]
    assert handler.state is StartState.READY


def test_many_threads_single_construction(connection, make_record) -> None:
    count = 0
    count_lock = threading.Lock()
    barrier = threading.Barrier(8)

    def counting_factory(dsn):
        nonlocal count
        with count_lock:
            count += 1
        return EventClient(connection)

    register_factory("counting", counting_factory)
    handler = SentryHandler(dsn=DSN, client_factory="counting")

    def worker(i: int) -> None:
        barrier.wait(timeout=5)
        handler.publish(make_record(f"msg {i}"))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert count == 1
    assert len(connection.events) == 8


def test_reentrant_publish_during_construction_is_dropped(connection, errors, make_record) -> None:
    log = logging.getLogger("tests.reentrant")
    inner_results: list[bool] = []

    def logging_factory(dsn):
        log.error("building client for %s", dsn.host)
        inner_results.append(handler.publish(make_record("direct re-entry")))
        return EventClient(connection)

    register_factory("logging", logging_factory)
    handler = SentryHandler(dsn=DSN, client_factory="logging")
    handler.error_manager = errors
    log.addHandler(handler)

    done = threading.Event()

    def run() -> None:
        log.error("outer")
        done.set()

    t = threading.Thread(target=run, daemon=True)
    t.start()
    try:
        assert done.wait(timeout=5), "publish deadlocked on re-entry"
    finally:
        log.removeHandler(handler)

    assert [e.message for e in connection.events] == ["outer"]
    assert inner_results == [False]
    assert errors.errors == []
    assert handler.state is StartState.READY
