"""Idempotency Keys — deterministic, prefixed, input-sensitive."""

from urbanestate.core.idempotency import generate_idempotency_key


def test_same_inputs_same_key():
    a = generate_idempotency_key("p1", "s1", "+971501234567", "1.1.1.1")
    b = generate_idempotency_key("p1", "s1", "+971501234567", "1.1.1.1")
    assert a == b


def test_key_shape():
    key = generate_idempotency_key("p1", "s1", "+971501234567", "1.1.1.1")
    assert key.startswith("bk_")
    assert len(key) == 3 + 24
    int(key[3:], 16)


def test_any_component_changes_key():
    base = ("p1", "s1", "+971501234567", "1.1.1.1")
    keys = {generate_idempotency_key(*base)}
    for i in range(4):
        changed = list(base)
        changed[i] = changed[i] + "x"
        keys.add(generate_idempotency_key(*changed))
    assert len(keys) == 5


def test_slot_change_changes_key():
    first = generate_idempotency_key("p1", "s1", "+15550001111", "1.2.3.4")
    assert first == generate_idempotency_key("p1", "s1", "+15550001111", "1.2.3.4")
    assert first != generate_idempotency_key("p1", "s2", "+15550001111", "1.2.3.4")
