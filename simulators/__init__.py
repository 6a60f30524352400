from simulators.scheduling import ThreadScheduler, VirtualScheduler
from simulators.room_simulator import RoomSimulator

__all__ = [
    'ThreadScheduler',
    'VirtualScheduler',
    'RoomSimulator',
]
