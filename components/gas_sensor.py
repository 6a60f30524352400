"""MQ-2 gas sensor - GAS"""

import random

from room_state import SystemState

MIN_READING = 0
MAX_READING = 100


def clamp_reading(value):
    """Clamp a gas reading to the 0-100 % range."""
    try:
        value = int(round(float(value)))
    except (TypeError, ValueError):
        raise ValueError(f"Invalid gas reading: {value!r}")
    return max(MIN_READING, min(MAX_READING, value))


class RandomSensorSource:
    """
    Synthetic gas sensor.

    Every tick (interval_ms, 2000 by default) it draws a background reading
    from [low, high) while the room is NORMAL and the current reading is
    below refresh_below. Once the reading is elevated or the room is in
    EMERGENCY the readings freeze.

    Parameters:
        settings     (dict)      - "sensor" section of settings.json
        get_snapshot (callable)  - returns the current RoomSnapshot
        on_reading   (callable)  - receives every new reading
        rng          (Random)    - random source, seeded from settings if None
    """

    def __init__(self, settings, get_snapshot, on_reading, rng=None):
        self.settings = settings
        self.name = settings.get('name', 'MQ-2 Gas Sensor')
        self.interval_ms = int(settings.get('interval_ms', 2000))
        self.low = int(settings.get('low', 5))
        self.high = int(settings.get('high', 10))
        self.refresh_below = int(settings.get('refresh_below', 15))
        self.forced_reading = int(settings.get('forced_reading', 85))

        self.get_snapshot = get_snapshot
        self.on_reading = on_reading
        self.rng = rng if rng is not None else random.Random(settings.get('seed'))

    def tick(self):
        snapshot = self.get_snapshot()
        if snapshot.system_state is not SystemState.NORMAL:
            return
        if snapshot.gas_reading >= self.refresh_below:
            return
        self.on_reading(self.rng.randrange(self.low, self.high))

    def force_trigger(self):
        """Inject a leak reading regardless of the periodic tick."""
        self.on_reading(self.forced_reading)

    def inject(self, value):
        """Push an external reading (clamped) into the room."""
        self.on_reading(clamp_reading(value))
