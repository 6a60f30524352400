"""
Hazard state machine for the hazmat room.

States:
  NORMAL     - door open, ventilation closed, fan off, buzzer silent
  EMERGENCY  - door locked, ventilation open, fan on, buzzer sounding

Transitions:
  NORMAL    + reading > threshold          -> EMERGENCY (lockdown, alarm start)
  EMERGENCY + override by authorized role  -> NORMAL    (unlock, alarm stop,
                                                         reading reset to baseline)

EMERGENCY is never left because the reading falls again; recovery is always
operator driven.
"""

import threading

from components.gas_sensor import clamp_reading
from controllers.access_control import OVERRIDE, is_authorized
from room_state import ActuatorTargets, Role, RoomSnapshot, SystemState


class HazardController:
    """
    Thread-safe owner of the hazard record (reading, state, targets).

    Parameters:
        settings  (dict)            - "hazard" section of settings.json
        alarm     (AlarmScheduler)  - started on lockdown, stopped on override
        baseline  (int)             - reading restored by an override
        on_state_change (callable)  - called with the new RoomSnapshot after
                                      every transition
    """

    def __init__(self, settings, alarm, baseline=5, on_state_change=None):
        self.settings = settings
        self.threshold = int(settings.get('threshold', 70))
        self.baseline = clamp_reading(baseline)
        self.alarm = alarm
        self.on_state_change = on_state_change

        self._lock = threading.RLock()
        self._gas_reading = self.baseline
        self._state = SystemState.NORMAL
        self._targets = ActuatorTargets.for_state(SystemState.NORMAL)

    # ========== READ MODEL ==========

    @property
    def lock(self):
        return self._lock

    def snapshot(self):
        with self._lock:
            return RoomSnapshot(
                gas_reading=self._gas_reading,
                system_state=self._state,
                targets=self._targets,
                alarm_active=self.alarm.is_alarming(),
            )

    def get_state(self):
        with self._lock:
            return self._state

    def get_reading(self):
        with self._lock:
            return self._gas_reading

    def get_targets(self):
        with self._lock:
            return self._targets

    # ========== PUBLIC API ==========

    def update_reading(self, value):
        """Store a new gas reading (clamped) and evaluate the threshold."""
        reading = clamp_reading(value)
        with self._lock:
            self._gas_reading = reading
            if self._state is SystemState.NORMAL and reading > self.threshold:
                self._enter_emergency_locked()

    def override(self, role):
        """
        Leave EMERGENCY. Refused silently for roles without override
        privilege; no-op while NORMAL.
        """
        with self._lock:
            if self._state is not SystemState.EMERGENCY:
                return
            if not is_authorized(role, OVERRIDE):
                parsed = Role.parse(role)
                name = parsed.label if parsed else repr(role)
                print(f"[ACCESS] Override refused for {name}")
                return
            self._enter_normal_locked()
        # a tone listener may be waiting on _lock, so the last tone is
        # awaited only after release
        self.alarm.join()

    # ========== INTERNAL TRANSITIONS (called while holding _lock) ==========

    def _enter_emergency_locked(self):
        self._state = SystemState.EMERGENCY
        self._targets = ActuatorTargets.for_state(SystemState.EMERGENCY)
        self.alarm.start()
        print(f"[HAZARD] *** GAS {self._gas_reading}% > {self.threshold}% - LOCKDOWN ***")
        self._notify_locked()

    def _enter_normal_locked(self):
        self._targets = ActuatorTargets.for_state(SystemState.NORMAL)
        self.alarm.stop(wait=False)
        self._gas_reading = self.baseline
        self._state = SystemState.NORMAL
        print("[HAZARD] System override -> NORMAL")
        self._notify_locked()

    def _notify_locked(self):
        if self.on_state_change:
            self.on_state_change(self.snapshot())
