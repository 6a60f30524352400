import random
import threading
import time

import pytest

from controllers import RoomController
from room_state import ActuatorTargets, DoorTarget, FanTarget, Role, SystemState, WindowTarget
from simulators import ThreadScheduler, VirtualScheduler

LOCKDOWN = ActuatorTargets(DoorTarget.LOCKED, WindowTarget.OPEN, FanTarget.ON)
RELEASED = ActuatorTargets(DoorTarget.OPEN, WindowTarget.CLOSED, FanTarget.OFF)


# ========== SCENARIOS ==========

def test_trigger_leak_enters_lockdown(room):
    assert room.hazard.get_reading() == 5
    room.force_trigger()
    snap = room.hazard.snapshot()

    assert snap.gas_reading == 85
    assert snap.system_state is SystemState.EMERGENCY
    assert snap.targets == LOCKDOWN
    assert snap.alarm_active


def test_staff_override_is_refused(room):
    room.force_trigger()
    room.override("staff")
    snap = room.hazard.snapshot()

    assert snap.system_state is SystemState.EMERGENCY
    assert snap.gas_reading == 85
    assert snap.alarm_active


def test_admin_override_releases_room(room):
    room.force_trigger()
    room.override("admin")
    snap = room.hazard.snapshot()

    assert snap.system_state is SystemState.NORMAL
    assert snap.gas_reading == 5
    assert snap.targets == RELEASED
    assert not snap.alarm_active


def test_manual_readings_cross_threshold(room):
    room.set_reading(50)
    assert room.hazard.get_state() is SystemState.NORMAL
    room.set_reading(75)
    assert room.hazard.get_state() is SystemState.EMERGENCY


# ========== TIMELINE ==========

def test_sensor_tick_every_two_seconds(room, scheduler):
    seen = []
    room.start()
    for _ in range(5):
        scheduler.advance(1999)
        seen.append(room.hazard.get_reading())
        scheduler.advance(1)
        seen.append(room.hazard.get_reading())

    assert all(5 <= r < 10 for r in seen)
    assert room.hazard.get_state() is SystemState.NORMAL


def test_readings_reproducible_with_seeded_rng(settings):
    readings = []
    for _ in range(2):
        scheduler = VirtualScheduler()
        room = RoomController(settings, scheduler=scheduler, rng=random.Random(5), auto_frames=False)
        room.start()
        run = []
        for _ in range(10):
            scheduler.advance(2000)
            run.append(room.hazard.get_reading())
        room.cleanup()
        readings.append(run)
    assert readings[0] == readings[1]


def test_readings_freeze_during_lockdown(room, scheduler):
    room.start()
    room.force_trigger()
    scheduler.advance(20000)
    assert room.hazard.get_reading() == 85
    assert room.alarm.tone_count == 50


def test_stop_cancels_every_schedule(room, scheduler):
    room.start()
    room.force_trigger()
    scheduler.advance(1000)
    room.stop()
    tones = room.alarm.tone_count
    scheduler.advance(10000)

    assert scheduler.pending() == 0
    assert room.alarm.tone_count == tones


def test_frames_animate_lockdown(settings, scheduler):
    room = RoomController(settings, scheduler=scheduler, auto_frames=True)
    room.start()
    room.force_trigger()
    scheduler.advance(3000)
    p = room.get_physical()
    room.cleanup()

    assert p.door_angle == pytest.approx(0.0)
    assert p.window_offset > 2.9
    assert p.fan_speed > 3.5
    assert p.fan_angle < 0
    assert 2.0 <= p.alarm_intensity <= 6.0


def test_manual_tick_follows_targets(room):
    room.force_trigger()
    p = room.tick(10.0)
    assert p.fan_speed == pytest.approx(4.0)
    room.override(Role.HEAD_OF_OFFICE)
    p = room.tick(10.0)
    assert p.fan_speed == pytest.approx(0.0, abs=1e-5)
    assert p.alarm_intensity == 2.0


# ========== ROLES & STATUS ==========

def test_override_uses_selected_role(room):
    room.force_trigger()
    room.select_role("secretary")
    room.override()
    assert room.hazard.get_state() is SystemState.EMERGENCY

    room.select_role("head of office")
    room.override()
    assert room.hazard.get_state() is SystemState.NORMAL


def test_select_unknown_role_raises(room):
    with pytest.raises(ValueError):
        room.select_role("janitor")
    assert room.current_role is Role.ADMIN


def test_status_labels(room):
    status = room.get_status()
    assert status["system_state"] == "NORMAL"
    assert status["labels"]["door"] == "OPEN"
    assert status["labels"]["trigger"] == "TEST TRIGGER LEAK"
    assert status["labels"]["auth"] == "AUTH: ADMIN DETECTED"

    room.force_trigger()
    room.select_role(Role.STAFF)
    status = room.get_status()
    assert status["gas_reading"] == 85
    assert status["alarm_active"] is True
    assert status["labels"] == {
        "door": "LOCKED",
        "window": "OPEN",
        "fan": "ACTIVE",
        "trigger": "HAZARD ACTIVE",
        "auth": "ACCESS DENIED",
    }
    assert status["label"].startswith("NODE:")


def test_handle_command(room, monkeypatch):
    assert room.handle_command("x") is None
    assert room.handle_command("s") is True
    assert room.handle_command("t") is True
    assert room.hazard.get_state() is SystemState.EMERGENCY

    monkeypatch.setattr("builtins.input", lambda prompt="": "staff")
    room.handle_command("r")
    room.handle_command("o")
    assert room.hazard.get_state() is SystemState.EMERGENCY

    monkeypatch.setattr("builtins.input", lambda prompt="": "admin")
    room.handle_command("r")
    room.handle_command("o")
    assert room.hazard.get_state() is SystemState.NORMAL

    monkeypatch.setattr("builtins.input", lambda prompt="": "not a number")
    assert room.handle_command("g") is True
    assert room.hazard.get_reading() == 5


def test_stop_marks_room_torn_down(room, scheduler):
    room.start()
    room.force_trigger()
    room.stop()
    status = room.get_status()

    assert status["system_state"] == "EMERGENCY"
    assert status["alarm_active"] is False
    assert status["torn_down"] is True
    assert status["running"] is False

    room.start()
    status = room.get_status()
    assert status["torn_down"] is False
    assert status["alarm_active"] is True
    scheduler.advance(400)
    assert room.alarm.tone_count == 1


# ========== THREADED HOST ==========

@pytest.fixture
def threaded_room(settings):
    room = RoomController(settings, scheduler=ThreadScheduler(), auto_frames=False)
    yield room
    room.cleanup()


def test_override_while_listener_reads_room(threaded_room):
    in_listener = threading.Event()
    seen = []

    def listener(tone):
        in_listener.set()
        time.sleep(0.1)
        seen.append(threaded_room.hazard.snapshot())

    threaded_room.alarm.add_listener(listener)
    threaded_room.force_trigger()
    assert in_listener.wait(timeout=2)

    worker = threading.Thread(target=threaded_room.override, args=("admin",), daemon=True)
    worker.start()
    worker.join(timeout=3)

    assert not worker.is_alive()
    assert threaded_room.hazard.get_state() is SystemState.NORMAL
    assert not threaded_room.alarm.is_alarming()
    tones = threaded_room.alarm.tone_count
    time.sleep(0.5)
    assert threaded_room.alarm.tone_count == tones


def test_hazard_episodes_leave_no_schedules_behind(threaded_room):
    for _ in range(20):
        threaded_room.force_trigger()
        threaded_room.override(Role.ADMIN)

    assert threaded_room.scheduler.pending() == 0


def test_cleanup_shuts_down_owned_scheduler(settings):
    room = RoomController(settings, auto_frames=False)
    room.start()
    room.force_trigger()
    assert room.scheduler.pending() == 2
    room.cleanup()
    assert room.scheduler.pending() == 0
