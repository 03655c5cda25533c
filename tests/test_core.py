"""Tests for prioevents module-level functions."""

import pytest

from prioevents import (
    EventBus,
    clear,
    fire,
    get_default_bus,
    listeners,
    off,
    on,
    once,
    one,
    receiver,
    register,
    trigger,
)


@pytest.fixture(autouse=True)
def clean_default_bus():
    clear()
    yield
    clear()


def test_on_and_trigger():
    """Test on() and trigger() on the default bus."""
    out = []

    on("evt", lambda x: out.append(("a", x)))

    assert trigger("evt", 1) is True
    assert out == [("a", 1)]


def test_priority_and_once():
    """Test priority and once on the default bus."""
    out = []

    on("p", lambda: out.append(1), 1)
    on("p", lambda: out.append(2), 0)
    once("p", lambda: out.append(3), 0)

    trigger("p")
    # Priority 0 first, preserving registration order among same priority
    assert out == [2, 3, 1]
    out.clear()
    trigger("p")
    assert out == [2, 1]


def test_receiver_decorator_with_bus():
    """Test receiver decorator with bus parameter."""
    another_bus = EventBus()
    out = []

    @receiver("evt")  # Registered on default bus
    def handle_default_bus(x):
        out.append(("default_bus", x))

    @receiver("evt", bus=another_bus)  # Registered on another bus
    def handle_another_bus(x):
        out.append(("another_bus", x))

    trigger("evt", 1)
    assert out == [("default_bus", 1)]
    out.clear()
    another_bus.trigger("evt", 2)
    assert out == [("another_bus", 2)]


def test_receiver_decorator_once():
    """Test receiver(once=True) on the default bus."""
    out = []

    @receiver("evt", once=True, priority=1)
    def handler():
        out.append("called")

    fire("evt")
    fire("evt")
    assert out == ["called"]


def test_off_and_listeners():
    """Test off() and listeners()."""

    def h(): ...

    on("x", h)
    assert h in listeners("x")
    assert off("x", h) is True
    assert h not in listeners("x")
    assert off("x") is False


def test_aliases():
    """Test register, one and fire aliases."""
    out = []

    register("evt", lambda: out.append("r"))
    one("evt", lambda: out.append("o"))

    fire("evt")
    fire("evt")
    assert out == ["r", "o", "r"]


def test_get_default_bus():
    """Test that the module functions act on get_default_bus()."""

    def h(): ...

    on("evt", h)
    assert get_default_bus().listeners("evt") == [h]
