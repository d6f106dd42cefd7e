import math
import sys

import moderngl
import pygame

from bezier_rope import config
from bezier_rope.clock import FrameScheduler
from bezier_rope.interaction import InteractionController
from bezier_rope.models import Vector2
from bezier_rope.motion import SimulatedMotionSource, TiltEmulator
from bezier_rope.renderer import RENDER_MODES, Renderer
from bezier_rope.simulation import CurveSimulation

HELP_LINE = "Move device (or drag points) - P0 & P3 fixed. P1 & P2 are springy."
TILT_STEP = math.radians(1.5)  # per frame while an arrow key is held


def clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))


def hud_lines(sim: CurveSimulation, tilt: TiltEmulator, renderer: Renderer, fps: float) -> list[str]:
    sample = sim.motion.latest()
    return [
        HELP_LINE,
        f"FPS: {fps:.1f}  Mode: {RENDER_MODES[renderer.render_mode]}",
        f"Stiffness: {sim.stiffness:.1f}  Damping: {sim.damping:.1f}",
        f"Motion: {'on' if sim.motion_enabled else 'off'}  "
        f"pitch {math.degrees(sample.pitch):+.1f}  roll {math.degrees(sample.roll):+.1f}",
        "" if sim.running else "[PAUSED]",
    ]


def finger_location(event: pygame.event.Event, width: int, height: int) -> Vector2:
    # Finger events carry normalized coordinates
    return Vector2(event.x * width, event.y * height)


def main() -> None:
    # 1. Window + GL context
    width, height = 1000, 700
    pygame.init()
    clock = pygame.time.Clock()
    pygame.display.set_mode((width, height), pygame.OPENGL | pygame.DOUBLEBUF | pygame.RESIZABLE)
    pygame.display.set_caption("Bezier Rope")
    ctx = moderngl.create_context()
    renderer = Renderer(ctx, width, height)

    # 2. Motion source on its own thread, fed by the keyboard tilt emulator
    tilt = TiltEmulator()
    motion = SimulatedMotionSource(tilt.read)

    # 3. Simulation + input
    sim = CurveSimulation(width, height, motion=motion)
    controller = InteractionController(sim)
    scheduler = FrameScheduler(sim)

    print("\n" + "=" * 60)
    print("BEZIER ROPE - springy handles at 60 FPS")
    print("=" * 60)
    print("Pointer:")
    print("  Drag P1 / P2    - Grab a handle")
    print("  Double click    - Reset positions")
    print("\nMotion:")
    print("  Arrow Keys      - Tilt the 'device'")
    print("  0               - Level")
    print("  M               - Toggle motion input")
    print("\nSimulation:")
    print("  Space           - Pause/Resume")
    print("  R               - Reset positions")
    print("  W               - Cycle render mode")
    print("\nPhysics Parameters:")
    print("  Q / A           - Increase/Decrease Stiffness")
    print("  E / D           - Increase/Decrease Damping")
    print("  Shift + Q/A/E/D - 10x faster adjustment")
    print("=" * 60)
    print(f"\n  Stiffness: {sim.stiffness:.1f}")
    print(f"  Damping:   {sim.damping:.1f}\n")

    sim.start()
    scheduler.reset()

    running = True
    stiffness_step = 1.0
    damping_step = 0.5

    while running:
        now = pygame.time.get_ticks() / 1000.0

        # Handle Events
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.VIDEORESIZE:
                width, height = max(1, event.w), max(1, event.h)
                renderer.resize(width, height)
                sim.on_resize(width, height)

            elif event.type == pygame.KEYDOWN:
                shift_held = bool(event.mod & pygame.KMOD_SHIFT)
                factor = 10 if shift_held else 1

                if event.key == pygame.K_ESCAPE:
                    running = False

                elif event.key == pygame.K_SPACE:
                    if sim.running:
                        sim.stop()
                    else:
                        sim.start()
                        scheduler.reset()

                elif event.key == pygame.K_r:
                    sim.reset_positions()

                elif event.key == pygame.K_w:
                    print(f"[Render Mode: {renderer.cycle_render_mode()}]")

                elif event.key == pygame.K_m:
                    sim.motion_enabled = not sim.motion_enabled
                    print(f"[Motion {'ON' if sim.motion_enabled else 'OFF'}]")

                elif event.key == pygame.K_0:
                    tilt.level()

                # Stiffness
                elif event.key == pygame.K_q:
                    sim.stiffness = clamp(sim.stiffness + stiffness_step * factor, config.STIFFNESS_RANGE)
                    print(f"Stiffness: {sim.stiffness:.1f}")

                elif event.key == pygame.K_a:
                    sim.stiffness = clamp(sim.stiffness - stiffness_step * factor, config.STIFFNESS_RANGE)
                    print(f"Stiffness: {sim.stiffness:.1f}")

                # Damping
                elif event.key == pygame.K_e:
                    sim.damping = clamp(sim.damping + damping_step * factor, config.DAMPING_RANGE)
                    print(f"Damping:   {sim.damping:.1f}")

                elif event.key == pygame.K_d:
                    sim.damping = clamp(sim.damping - damping_step * factor, config.DAMPING_RANGE)
                    print(f"Damping:   {sim.damping:.1f}")

            # Mouse (touch-emulated mouse events are handled as fingers below)
            elif event.type == pygame.MOUSEBUTTONDOWN and not getattr(event, "touch", False):
                if event.button == 1:
                    controller.pointer_down(Vector2(*event.pos), now)

            elif event.type == pygame.MOUSEBUTTONUP and not getattr(event, "touch", False):
                if event.button == 1:
                    controller.pointer_up(Vector2(*event.pos), now)

            elif event.type == pygame.MOUSEMOTION and not getattr(event, "touch", False):
                if event.buttons[0]:
                    controller.pointer_move(Vector2(*event.pos))

            # Touch
            elif event.type == pygame.FINGERDOWN:
                controller.pointer_down(finger_location(event, width, height), now)

            elif event.type == pygame.FINGERMOTION:
                controller.pointer_move(finger_location(event, width, height))

            elif event.type == pygame.FINGERUP:
                controller.pointer_up(finger_location(event, width, height), now)

            elif event.type == pygame.WINDOWFOCUSLOST:
                controller.pointer_cancel()

        # Continuous Input
        keys = pygame.key.get_pressed()
        if keys[pygame.K_LEFT]:
            tilt.nudge(0.0, -TILT_STEP)
        if keys[pygame.K_RIGHT]:
            tilt.nudge(0.0, TILT_STEP)
        if keys[pygame.K_UP]:
            tilt.nudge(TILT_STEP, 0.0)
        if keys[pygame.K_DOWN]:
            tilt.nudge(-TILT_STEP, 0.0)

        # Physics
        scheduler.step()

        # Render
        frame = sim.frame()
        renderer.draw(frame, hud_lines(sim, tilt, renderer, clock.get_fps()))

        clock.tick(config.TARGET_FPS)

    # Cleanup
    print("\n[Main] Shutting down...")
    sim.teardown()
    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
