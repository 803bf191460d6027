from __future__ import annotations

from chip8vm import capture_state, diff_states, empty_state_diff


def test_identical_snapshots_have_empty_diff(vm) -> None:
    before = capture_state(vm)
    after = capture_state(vm)
    assert before == after
    assert diff_states(before, after).is_empty()
    assert diff_states(None, after).is_empty()
    assert empty_state_diff().names() == ()


def test_diff_after_store_and_call(load_words) -> None:
    # LD V0, 0x2A ; LD I, 0x300 ; LD [I], V0 ; CALL 0x208
    vm = load_words(0x602A, 0xA300, 0xF055, 0x2208)
    before = capture_state(vm)
    for _ in range(4):
        vm.step()
    diff = diff_states(before, capture_state(vm))

    names = diff.names()
    assert "registers.V0" in names
    assert "index" in names
    assert "pc" in names
    assert "stack" in names
    assert "instruction_count" in names
    assert [d.name for d in diff.memory] == ["0x300"]
    assert diff.memory[0].before == 0
    assert diff.memory[0].after == 0x2A
    assert not diff.display_changed
    assert diff.timers == ()


def test_diff_tracks_display_keypad_and_timers(load_words) -> None:
    vm = load_words(0xA000, 0xD005)
    before = capture_state(vm)
    vm.step()
    vm.step()
    vm.set_key_down(7)
    vm.sound_timer = 9
    after = capture_state(vm)

    diff = diff_states(before, after)
    assert diff.display_changed
    assert after.display.lit_count() == 14
    assert after.display.draw_pending
    assert [d.name for d in diff.keypad] == ["pressed_keys"]
    assert diff.keypad[0].after == (7,)
    assert [(d.name, d.after) for d in diff.timers] == [("sound", 9)]


def test_snapshot_records_wait_state(load_words) -> None:
    vm = load_words(0xF30A)
    vm.step()
    state = capture_state(vm)
    assert state.cpu.mode == "waiting_for_key"
    assert state.cpu.waiting_register == 3
    assert state.timers.period_ms == 17
