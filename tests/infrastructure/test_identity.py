"""Tests for the identity store."""

from tradelog.domain.events import EventBus, IdentityChanged
from tradelog.infrastructure.identity import CallerIdentity, IdentityStore


def test_set_identity_publishes_change():
    bus = EventBus()
    events = []
    bus.subscribe(IdentityChanged, events.append)
    store = IdentityStore(bus)

    alice = CallerIdentity(principal="alice")
    store.set_identity(alice)

    assert store.identity == alice
    assert store.is_authenticated
    assert [(e.identity, e.is_initializing) for e in events] == [(alice, False)]


def test_unchanged_identity_is_not_republished():
    bus = EventBus()
    events = []
    bus.subscribe(IdentityChanged, events.append)
    alice = CallerIdentity(principal="alice")
    store = IdentityStore(bus, alice)

    store.set_identity(CallerIdentity(principal="alice"))

    assert events == []


def test_initialization_then_logout():
    bus = EventBus()
    events = []
    bus.subscribe(IdentityChanged, events.append)
    store = IdentityStore(bus, CallerIdentity(principal="alice"))

    store.begin_initialization()
    assert store.is_initializing

    store.clear()
    assert store.identity is None
    assert not store.is_initializing
    assert [e.is_initializing for e in events] == [True, False]
