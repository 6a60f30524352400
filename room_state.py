"""Shared state records for the hazmat room simulation"""

import math
from dataclasses import dataclass
from enum import Enum


class SystemState(str, Enum):
    NORMAL = 'NORMAL'
    EMERGENCY = 'EMERGENCY'


class Role(str, Enum):
    """Operator roles. Membership is fixed."""

    ADMIN = 'admin'
    HEAD_OF_OFFICE = 'head_of_office'
    SECRETARY = 'secretary'
    HEAD_OF_DIVISION = 'head_of_division'
    STAFF = 'staff'

    @classmethod
    def parse(cls, value):
        """
        Return the Role for `value` or None when it is not a known role.
        Accepts Role members, canonical names and display names
        ("head of office").
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower().replace(' ', '_').replace('-', '_')
        for role in cls:
            if role.value == key:
                return role
        return None

    @property
    def label(self):
        return self.value.replace('_', ' ')


class DoorTarget(str, Enum):
    OPEN = 'OPEN'
    LOCKED = 'LOCKED'


class WindowTarget(str, Enum):
    CLOSED = 'CLOSED'
    OPEN = 'OPEN'


class FanTarget(str, Enum):
    OFF = 'OFF'
    ON = 'ON'


@dataclass(frozen=True)
class ActuatorTargets:
    door: DoorTarget
    window: WindowTarget
    fan: FanTarget

    @classmethod
    def for_state(cls, state):
        """Targets are a pure function of the system state."""
        if state is SystemState.EMERGENCY:
            return cls(DoorTarget.LOCKED, WindowTarget.OPEN, FanTarget.ON)
        return cls(DoorTarget.OPEN, WindowTarget.CLOSED, FanTarget.OFF)

    def to_dict(self):
        return {
            'door': self.door.value,
            'window': self.window.value,
            'fan': self.fan.value,
        }


@dataclass(frozen=True)
class ActuatorPhysical:
    door_angle: float
    window_offset: float
    fan_speed: float
    fan_angle: float
    alarm_intensity: float
    light_color: int
    beacon_scale: float

    def to_dict(self):
        return {
            'door_angle': self.door_angle,
            'door_degrees': math.degrees(self.door_angle),
            'window_offset': self.window_offset,
            'fan_speed': self.fan_speed,
            'fan_angle': self.fan_angle,
            'alarm_intensity': self.alarm_intensity,
            'light_color': f"#{self.light_color:06x}",
            'beacon_scale': self.beacon_scale,
        }


@dataclass(frozen=True)
class ToneEvent:
    """One buzzer beep, rendered by the audio layer."""

    waveform: str
    frequency: float
    amplitude: float
    floor: float
    duration: float
    ts: float

    def amplitude_at(self, t):
        """Gain `t` seconds into the tone (exponential ramp to `floor`)."""
        if t <= 0:
            return self.amplitude
        if t >= self.duration:
            return self.floor
        return self.amplitude * (self.floor / self.amplitude) ** (t / self.duration)


@dataclass(frozen=True)
class RoomSnapshot:
    """Read-only view of the hazard record."""

    gas_reading: int
    system_state: SystemState
    targets: ActuatorTargets
    alarm_active: bool

    @property
    def is_emergency(self):
        return self.system_state is SystemState.EMERGENCY

    def to_dict(self):
        return {
            'gas_reading': self.gas_reading,
            'system_state': self.system_state.value,
            'targets': self.targets.to_dict(),
            'alarm_active': self.alarm_active,
        }
