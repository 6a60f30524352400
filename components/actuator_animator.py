"""Door servo, ventilation servo, exhaust fan and siren light animation"""

import math

from room_state import (
    ActuatorPhysical,
    DoorTarget,
    FanTarget,
    WindowTarget,
)

NORMAL_LIGHT_COLOR = 0xeef7ff
ALARM_LIGHT_COLOR = 0xff0000


def smooth(value, target, rate, delta):
    """
    Exponential approach of `value` toward `target`.
    The step factor stays in [0, 1), so the result never passes the target.
    """
    if delta <= 0:
        return value
    result = value + (target - value) * (1.0 - math.exp(-rate * delta))
    # float rounding can step one ulp past the target
    if (target - result) * (target - value) < 0:
        return target
    return result


class ActuatorAnimator:
    """
    Per-frame transform of actuator targets into continuous physical values
    for the renderer. Values only ever move by smoothing toward the value
    implied by the current target.
    """

    def __init__(self, settings=None):
        settings = settings or {}
        self.settings = settings
        self.door_rate = float(settings.get('door_rate', 6.0))
        self.window_rate = float(settings.get('window_rate', 5.0))
        self.fan_up_rate = float(settings.get('fan_up_rate', 2.0))
        self.fan_down_rate = float(settings.get('fan_down_rate', 1.5))
        self.fan_max_speed = float(settings.get('fan_max_speed', 4.0))
        self.window_open_offset = float(settings.get('window_open_offset', 3.0))
        self.window_closed_offset = float(settings.get('window_closed_offset', 2.0))
        self.light_base = float(settings.get('light_base', 2.0))
        self.light_amplitude = float(settings.get('light_amplitude', 4.0))
        self.light_angular_rate = float(settings.get('light_angular_rate', 20.0))
        self.beacon_pulse = float(settings.get('beacon_pulse', 0.15))

        self.door_angle = float(settings.get('initial_door_angle', 0.0))
        self.window_offset = float(settings.get('initial_window_offset', 1.2))
        self.fan_speed = 0.0
        self.fan_angle = 0.0
        self.elapsed = 0.0

        self.alarm_intensity = self.light_base
        self.light_color = NORMAL_LIGHT_COLOR
        self.beacon_scale = 1.0

    # ========== TARGET MAPPING ==========

    def door_target_angle(self, door):
        # locked and closed share the shut position
        return math.pi / 2 if door is DoorTarget.OPEN else 0.0

    def window_target_offset(self, window):
        if window is WindowTarget.OPEN:
            return self.window_open_offset
        return self.window_closed_offset

    # ========== FRAME ==========

    def tick(self, targets, emergency, delta, elapsed=None):
        """
        Advance one frame.

        targets   (ActuatorTargets) - current discrete targets
        emergency (bool)            - drives the siren light
        delta     (float)           - seconds since the previous frame
        elapsed   (float)           - clock phase for the strobe; accumulated
                                      from the deltas when omitted
        """
        delta = max(0.0, float(delta))
        if elapsed is None:
            self.elapsed += delta
        else:
            self.elapsed = float(elapsed)

        self.door_angle = smooth(
            self.door_angle, self.door_target_angle(targets.door),
            self.door_rate, delta)
        self.window_offset = smooth(
            self.window_offset, self.window_target_offset(targets.window),
            self.window_rate, delta)

        if targets.fan is FanTarget.ON:
            self.fan_speed = smooth(self.fan_speed, self.fan_max_speed, self.fan_up_rate, delta)
        else:
            self.fan_speed = smooth(self.fan_speed, 0.0, self.fan_down_rate, delta)
        self.fan_angle -= self.fan_speed * delta

        if emergency:
            strobe = (math.sin(self.elapsed * self.light_angular_rate) + 1) / 2
            self.alarm_intensity = self.light_base + strobe * self.light_amplitude
            self.light_color = ALARM_LIGHT_COLOR
            self.beacon_scale = 1 + strobe * self.beacon_pulse
        else:
            self.alarm_intensity = self.light_base
            self.light_color = NORMAL_LIGHT_COLOR
            self.beacon_scale = 1.0

        return self.physical()

    def physical(self):
        return ActuatorPhysical(
            door_angle=self.door_angle,
            window_offset=self.window_offset,
            fan_speed=self.fan_speed,
            fan_angle=self.fan_angle,
            alarm_intensity=self.alarm_intensity,
            light_color=self.light_color,
            beacon_scale=self.beacon_scale,
        )
