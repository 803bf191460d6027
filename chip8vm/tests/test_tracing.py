from __future__ import annotations

import pytest

from chip8vm import StackUnderflowError
from chip8vm.tracing import TraceDispatcher, TraceEventType, TraceRecorder


@pytest.fixture
def recorder(vm) -> TraceRecorder:
    rec = TraceRecorder()
    vm.tracer.register(rec)
    return rec


def test_instruction_events(load_words, recorder) -> None:
    vm = load_words(0x6102, 0xA2F0)
    vm.step()
    vm.step()
    events = recorder.of_type(TraceEventType.INSTRUCTION)
    assert [(e.pc, e.payload["word"]) for e in events] == [(0x200, 0x6102), (0x202, 0xA2F0)]
    assert events[0].payload["mnemonic"] == "LD V1, 0x02"


def test_call_and_return_events(load_words, recorder) -> None:
    # CALL 0x204 ; (pad) ; RET
    vm = load_words(0x2204, 0x0000, 0x00EE)
    vm.step()
    vm.step()
    call = recorder.of_type(TraceEventType.CALL)[0]
    ret = recorder.of_type(TraceEventType.RETURN)[0]
    assert call.pc == 0x200
    assert call.payload == {"target": 0x204, "depth": 1}
    assert ret.pc == 0x204
    assert ret.payload == {"target": 0x202, "depth": 0}


def test_draw_event_reports_erasure(load_words, recorder) -> None:
    vm = load_words(0xD005, 0xD005)
    vm.step()
    vm.step()
    draws = recorder.of_type(TraceEventType.DRAW)
    assert [e.payload["erased"] for e in draws] == [False, True]
    assert draws[0].payload["rows"] == 5


def test_key_wait_and_resume_events(load_words, recorder) -> None:
    vm = load_words(0xF40A)
    vm.step()
    vm.step()
    vm.set_key_down(0xE)
    vm.step()
    waits = recorder.of_type(TraceEventType.KEY_WAIT)
    resumes = recorder.of_type(TraceEventType.KEY_RESUME)
    assert len(waits) == 1
    assert waits[0].payload == {"register": 4}
    assert resumes[0].payload == {"register": 4, "key": 0xE}


def test_fault_event(load_words, recorder) -> None:
    vm = load_words(0x00EE)
    with pytest.raises(StackUnderflowError):
        vm.step()
    fault = recorder.of_type(TraceEventType.FAULT)[0]
    assert fault.pc == 0x200
    assert fault.payload["error"] == "StackUnderflowError"


def test_timer_tick_event(vm, recorder) -> None:
    vm.delay_timer = 3
    vm.advance_timers(40)
    tick = recorder.of_type(TraceEventType.TIMER_TICK)[0]
    assert tick.payload == {"ticks": 2, "delay": 1, "sound": 0}


def test_register_is_idempotent_and_unregister_stops_events(load_words) -> None:
    dispatcher = TraceDispatcher()
    rec = TraceRecorder()
    dispatcher.register(rec)
    dispatcher.register(rec)
    assert len(tuple(dispatcher.observers())) == 1

    dispatcher.record_key_wait(0x200, 1)
    dispatcher.unregister(rec)
    dispatcher.record_key_wait(0x202, 2)
    assert not dispatcher.has_observers()
    assert len(rec.events) == 1
    rec.clear()
    assert rec.events == []
