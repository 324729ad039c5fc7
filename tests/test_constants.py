import pytest

from iotaweb.constants import (
    LedPattern,
    Priority,
    QueryKind,
    TraceEntry,
    TraceModule,
    clamp,
    trace_entry_from_word,
)


def test_priority_values_from_source():
    assert Priority(2) is Priority.LOW
    assert Priority(5) is Priority.MED
    assert Priority(8) is Priority.HIGH
    assert max(Priority(value) for value in range(2, 9)) is Priority.HIGH


def test_trace_module_values():
    assert TraceModule(10) is TraceModule.WEB
    assert TraceModule(26) is TraceModule.XURL
    assert TraceModule(35) is TraceModule.SCRIPTSET


def test_query_kind_values():
    kinds = [QueryKind(value) for value in (1, 2, 3, 4)]
    assert kinds == list(QueryKind)
    assert len(set(kinds)) == 4


def test_led_patterns():
    assert LedPattern.HALT == "R.R.R..."
    assert LedPattern.UPDATING.value == "R.G."
    assert LedPattern("G.R.R.G...") is LedPattern.BAD_CONFIG


def test_trace_entry_packs_seq_in_low_byte():
    entry = TraceEntry(seq=1, mod=2, id=3, det=4)
    assert entry.to_word() == 0x04030201


def test_trace_entry_round_trip():
    entry = TraceEntry(seq=200, mod=TraceModule.WEB, id=57, det=255)
    back = trace_entry_from_word(entry.to_word())
    assert back == entry


@pytest.mark.parametrize("word", [0, 1, 0xFFFFFFFF, 0x12345678])
def test_word_round_trip(word):
    assert trace_entry_from_word(word).to_word() == word


def test_default_detail_is_zero():
    assert TraceEntry(seq=9, mod=1, id=2).det == 0


@pytest.mark.parametrize("word", [-1, 0x100000000])
def test_word_out_of_range(word):
    with pytest.raises(ValueError):
        trace_entry_from_word(word)


def test_entry_field_out_of_range():
    with pytest.raises(ValueError):
        TraceEntry(seq=256, mod=0, id=0)
    with pytest.raises(ValueError):
        TraceEntry(seq=0, mod=-1, id=0)


def test_clamp_within_and_outside():
    assert clamp(5, 0, 10) == 5
    assert clamp(-3, 0, 10) == 0
    assert clamp(42, 0, 10) == 10
    assert clamp(0, 0, 10) == 0
    assert clamp(10, 0, 10) == 10


def test_clamp_floats():
    assert clamp(2.5, 1.0, 2.0) == 2.0
    assert clamp(1.5, 1.0, 2.0) == 1.5