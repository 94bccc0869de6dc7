import pytest

from vi_modal.engine import CountAccumulator, EngineState


def make_counter() -> tuple[CountAccumulator, EngineState]:
    state = EngineState()
    return CountAccumulator(state), state


def test_accumulate_concatenates_digits() -> None:
    counter, state = make_counter()

    counter.accumulate(1)
    counter.accumulate(2)

    assert state.count == 12
    assert counter.pending


def test_consume_defaults_to_one_and_resets() -> None:
    counter, state = make_counter()

    assert counter.consume() == 1

    counter.accumulate(4)
    assert counter.consume() == 4
    assert state.count is None


def test_peek_does_not_reset() -> None:
    counter, state = make_counter()
    counter.accumulate(7)

    assert counter.peek() == 7
    assert state.count == 7


def test_zero_starts_count_only_when_pending() -> None:
    counter, _ = make_counter()

    assert not counter.starts_count(0)
    assert counter.starts_count(5)

    counter.accumulate(5)
    assert counter.starts_count(0)


def test_accumulate_rejects_non_digits() -> None:
    counter, _ = make_counter()

    with pytest.raises(ValueError):
        counter.accumulate(10)
