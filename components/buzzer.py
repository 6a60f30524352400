import threading

from room_state import ToneEvent


class AlarmScheduler:
    """Room Buzzer - BZ

    While active, emits one decaying sawtooth ToneEvent every interval_ms
    (400 by default) to every registered listener.
    """

    def __init__(self, settings, scheduler, on_tone=None):
        self.settings = settings
        self.scheduler = scheduler
        self.interval_ms = int(settings.get('interval_ms', 400))
        self.waveform = settings.get('waveform', 'sawtooth')
        self.frequency = float(settings.get('frequency', 900))
        self.amplitude = float(settings.get('amplitude', 0.08))
        self.floor = float(settings.get('floor', 0.0001))
        self.duration = int(settings.get('duration_ms', 300)) / 1000.0

        self.active = False
        self.tone_count = 0
        self._handle = None
        self._stopped_handle = None
        self._lock = threading.Lock()
        self._listeners = []
        if on_tone is not None:
            self._listeners.append(on_tone)

    def add_listener(self, callback):
        self._listeners.append(callback)

    def start(self):
        """Start the recurring alarm. No-op while already active."""
        with self._lock:
            if self.active:
                return
            self.active = True
            self._handle = self.scheduler.call_every(self.interval_ms, self._fire)
        print(f"[ALARM] Buzzer ON ({self.waveform}, every {self.interval_ms} ms)")

    def _fire(self):
        if not self.active:
            return
        tone = ToneEvent(
            waveform=self.waveform,
            frequency=self.frequency,
            amplitude=self.amplitude,
            floor=self.floor,
            duration=self.duration,
            ts=self.scheduler.monotonic(),
        )
        self.tone_count += 1
        for listener in list(self._listeners):
            listener(tone)

    def stop(self, wait=True):
        """
        Stop alarm. No tone starts after this call; with wait=True no tone
        is still firing when it returns. wait=False is for callers holding
        a lock a tone listener may need; they call join() once released.
        """
        with self._lock:
            if not self.active:
                return
            self.active = False
            handle, self._handle = self._handle, None
            self._stopped_handle = handle
            if handle is not None:
                handle.cancel(wait=False)
        print("[ALARM] Buzzer OFF")
        if wait:
            self.join()

    def join(self):
        """Wait for a tone cancelled by stop() to finish firing."""
        handle = self._stopped_handle
        if handle is not None:
            handle.join()

    def is_alarming(self):
        return self.active

    def cleanup(self):
        self.stop()
