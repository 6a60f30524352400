"""Room simulator - drives the gas sensor tick and the animation frames"""


class RoomSimulator:
    """
    Schedules the periodic sources of a RoomController on a scheduler:
      - sensor tick every sensor.interval_ms (2000 ms)
      - animation frame every frame_interval_ms, with the measured delta

    frame_interval_ms=None leaves frames to the caller (room.tick(delta)).
    The alarm tick is owned by the AlarmScheduler itself.
    """

    def __init__(self, room, scheduler, frame_interval_ms=None):
        self.room = room
        self.scheduler = scheduler
        self.frame_interval_ms = frame_interval_ms
        self.running = False
        self.handles = []
        self._last_frame = None
        self._started = None

    def start(self):
        if self.running:
            return
        self.running = True
        self.handles.append(
            self.scheduler.call_every(self.room.sensor.interval_ms, self.room.sensor_tick)
        )
        if self.frame_interval_ms:
            self._started = self._last_frame = self.scheduler.monotonic()
            self.handles.append(
                self.scheduler.call_every(self.frame_interval_ms, self._frame)
            )

    def _frame(self):
        now = self.scheduler.monotonic()
        delta = now - self._last_frame
        self._last_frame = now
        self.room.tick(delta, elapsed=now - self._started)

    def stop(self):
        self.running = False
        for handle in self.handles:
            handle.cancel()
        self.handles = []
