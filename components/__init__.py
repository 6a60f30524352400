from components.gas_sensor import RandomSensorSource, clamp_reading
from components.buzzer import AlarmScheduler
from components.actuator_animator import ActuatorAnimator

__all__ = [
    'RandomSensorSource',
    'clamp_reading',
    'AlarmScheduler',
    'ActuatorAnimator',
]
