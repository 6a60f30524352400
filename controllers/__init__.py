from controllers.access_control import is_authorized
from controllers.hazard_controller import HazardController
from controllers.room_controller import RoomController

__all__ = [
    'is_authorized',
    'HazardController',
    'RoomController',
]
