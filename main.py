#!/usr/bin/env python3
"""
Smart Office Hazmat - Room Controller
"""

from settings import load_settings
from controllers import RoomController


def show_help():
    """Display help menu"""
    print("""
==================================================
COMMANDS
==================================================
  s - Status          h - Help            q - Quit
  a - Animation

  HAZARD:
  t - Test trigger leak
  o - System override (current role)
  r - Select role

  SIMULATION:
  g - Set gas level
==================================================""")


def main():
    """Main entry point"""
    print("\n" + "=" * 50)
    print("  SMART OFFICE HAZMAT - Room Controller")
    print("=" * 50 + "\n")

    # Load settings
    settings = load_settings()

    # Create controller
    controller = RoomController(settings)

    # Start sensor tick and animation
    controller.start()
    print("\n[SYSTEM] Running...  (press 'h' for help)\n")
    show_help()

    # Main loop
    running = True
    while running:
        try:
            cmd = input("\n> ").strip().lower()

            if not cmd:
                continue
            elif cmd == 'h':
                show_help()
            elif cmd == 'q':
                running = False
                print("\nExiting...")
            else:
                result = controller.handle_command(cmd)
                if result is None:
                    print("Unknown command. Press 'h' for help.")

        except KeyboardInterrupt:
            running = False
            print("\n\nExiting...")
        except Exception as e:
            print(f"[ERROR] {e}")

    # Cleanup
    controller.cleanup()
    print("[SYSTEM] Done.")


if __name__ == "__main__":
    main()
