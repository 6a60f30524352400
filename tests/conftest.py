import copy
import random

import pytest

from components import AlarmScheduler
from controllers import HazardController, RoomController
from settings import load_settings
from simulators import VirtualScheduler


@pytest.fixture(scope="session")
def base_settings():
    return load_settings()


@pytest.fixture
def settings(base_settings):
    return copy.deepcopy(base_settings)


@pytest.fixture
def scheduler():
    return VirtualScheduler()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def alarm(settings, scheduler):
    return AlarmScheduler(settings["alarm"], scheduler)


@pytest.fixture
def hazard(settings, alarm):
    return HazardController(settings["hazard"], alarm, baseline=5)


@pytest.fixture
def room(settings, scheduler, rng):
    controller = RoomController(settings, scheduler=scheduler, rng=rng, auto_frames=False)
    yield controller
    controller.cleanup()
