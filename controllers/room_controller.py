"""Room Controller - gas sensor, lockdown actuators, buzzer and override panel"""

from components import ActuatorAnimator, AlarmScheduler, RandomSensorSource
from controllers.access_control import OVERRIDE, is_authorized
from controllers.hazard_controller import HazardController
from room_state import DoorTarget, FanTarget, Role, WindowTarget
from simulators import RoomSimulator, ThreadScheduler


class RoomController:
    """
    Controller for the hazmat room.

    Wires the gas sensor, hazard state machine, buzzer and actuator animator
    onto one scheduler, and exposes the operator commands:
      force_trigger()  - inject a leak reading
      override(role)   - leave lockdown (admin / head of office only)
      tick(delta)      - advance the actuator animation one frame
    """

    def __init__(self, settings, scheduler=None, rng=None, auto_frames=True):
        self.settings = settings
        self.device_info = settings.get("device", {})
        sensor_cfg = settings.get("sensor", {})
        animation_cfg = settings.get("animation", {})
        console_cfg = settings.get("console", {})

        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler or ThreadScheduler()
        self.running = False
        self.torn_down = False

        self.current_role = Role.parse(console_cfg.get("default_role", "admin")) or Role.ADMIN

        print("=" * 50)
        print("Initializing Room Components...")
        print("=" * 50)

        self.alarm = AlarmScheduler(settings.get("alarm", {}), self.scheduler)
        self._log_init("BZ", settings.get("alarm", {}), "Buzzer")

        self.hazard = HazardController(
            settings.get("hazard", {}),
            self.alarm,
            baseline=sensor_cfg.get("baseline", 5),
        )

        self.sensor = RandomSensorSource(
            sensor_cfg,
            get_snapshot=self.hazard.snapshot,
            on_reading=self.hazard.update_reading,
            rng=rng,
        )
        self._log_init("GAS", sensor_cfg, "MQ-2 Gas Sensor")

        self.animator = ActuatorAnimator(animation_cfg)
        print("  [ACT] Door servo, ventilation servo, exhaust fan (SIM)")
        print("=" * 50)

        frame_interval = animation_cfg.get("frame_interval_ms", 16) if auto_frames else None
        self.simulator = RoomSimulator(self, self.scheduler, frame_interval_ms=frame_interval)

    def _log_init(self, code, s, default_name):
        print(f"  [{code}] {s.get('name', default_name)} (SIM)")

    # ========== COMMANDS ==========

    def sensor_tick(self):
        with self.hazard.lock:
            self.sensor.tick()

    def force_trigger(self):
        self.sensor.force_trigger()
        print(f"[SENSOR] Leak injected ({self.sensor.forced_reading}%)")

    def set_reading(self, value):
        self.sensor.inject(value)

    def override(self, role=None):
        self.hazard.override(self.current_role if role is None else role)

    def select_role(self, role):
        parsed = Role.parse(role)
        if parsed is None:
            raise ValueError(f"Unknown role: {role!r}")
        self.current_role = parsed
        return parsed

    def tick(self, delta, elapsed=None):
        with self.hazard.lock:
            snapshot = self.hazard.snapshot()
            return self.animator.tick(snapshot.targets, snapshot.is_emergency, delta, elapsed)

    # ========== CONTROL ==========

    def start(self):
        """Start the sensor tick and animation frames"""
        self.running = True
        self.torn_down = False
        # restore the buzzer of a lockdown interrupted by stop()
        with self.hazard.lock:
            if self.hazard.snapshot().is_emergency:
                self.alarm.start()
        self.simulator.start()

    def stop(self):
        """
        Cancel every schedule; nothing mutates the room afterwards.
        The status reports torn_down until the next start().
        """
        self.running = False
        self.torn_down = True
        self.simulator.stop()
        self.alarm.stop()

    def cleanup(self):
        self.stop()
        self.alarm.cleanup()
        if self._owns_scheduler:
            self.scheduler.shutdown()

    # ========== STATUS ==========

    def get_physical(self):
        with self.hazard.lock:
            return self.animator.physical()

    def get_status(self):
        """Return the read model for the panel"""
        snapshot = self.hazard.snapshot()
        physical = self.get_physical()
        targets = snapshot.targets
        authorized = is_authorized(self.current_role, OVERRIDE)

        status = snapshot.to_dict()
        status.update({
            "device": self.device_info.get("id", "ROOM"),
            "label": self.device_info.get("label", ""),
            "physical": physical.to_dict(),
            "tone_count": self.alarm.tone_count,
            "running": self.running,
            "torn_down": self.torn_down,
            "role": self.current_role.value,
            "override_authorized": authorized,
            "labels": {
                "door": "OPEN" if targets.door is DoorTarget.OPEN else "LOCKED",
                "window": "OPEN" if targets.window is WindowTarget.OPEN else "CLOSED",
                "fan": "ACTIVE" if targets.fan is FanTarget.ON else "STANDBY",
                "trigger": "HAZARD ACTIVE" if snapshot.is_emergency else "TEST TRIGGER LEAK",
                "auth": (f"AUTH: {self.current_role.label.upper()} DETECTED"
                         if authorized else "ACCESS DENIED"),
            },
        })
        return status

    def show_status(self):
        """Print status to console"""
        status = self.get_status()
        labels = status["labels"]

        print("\n" + "=" * 40)
        print(f"ROOM STATUS  {status['label']}")
        print("=" * 40)
        print(f"  [GAS]   Level:      {status['gas_reading']}%")
        print(f"  [SYS]   State:      {status['system_state']}")
        print(f"  [DOOR]  Door:       {labels['door']}")
        print(f"  [VENT]  Window:     {labels['window']}")
        print(f"  [FAN]   Exhaust:    {labels['fan']}")
        print(f"  [BZ]    Buzzer:     {'ALARM' if status['alarm_active'] else 'OFF'}")
        print(f"  [ROLE]  Operator:   {self.current_role.label} ({labels['auth']})")
        print("=" * 40)

    def show_animation(self):
        p = self.get_physical().to_dict()
        print("\n" + "=" * 40)
        print("ACTUATOR ANIMATION")
        print("=" * 40)
        print(f"  Door angle:     {p['door_degrees']:.1f} deg")
        print(f"  Window offset:  {p['window_offset']:.3f}")
        print(f"  Fan speed:      {p['fan_speed']:.3f}")
        print(f"  Fan angle:      {p['fan_angle']:.2f} rad")
        print(f"  Siren light:    {p['alarm_intensity']:.2f} {p['light_color']}")
        print("=" * 40)

    def handle_command(self, cmd):
        """Handle user command. Returns None for unknown commands."""

        if cmd == 's':
            self.show_status()
        elif cmd == 'a':
            self.show_animation()
        elif cmd == 't':
            self.force_trigger()
        elif cmd == 'o':
            self.override()
        elif cmd == 'r':
            names = ", ".join(role.label for role in Role)
            role = input(f"Role ({names}): ").strip()
            try:
                self.select_role(role)
                print(f"[ROLE] Operator: {self.current_role.label}")
            except ValueError as e:
                print(f"[ERROR] {e}")
        elif cmd == 'g':
            value = input("Gas level (0-100): ").strip()
            try:
                self.set_reading(value)
                print(f"[SIM] Gas level {self.hazard.get_reading()}%")
            except ValueError as e:
                print(f"[ERROR] {e}")
        else:
            return None

        return True
