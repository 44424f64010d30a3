"""
tick-state pygame demo
A square driven by a StateManager. The pygame frame loop calls update(dt)
with the real frame delta.

Keys: 1 idle, 2 wander, 3 dash (needs energy), F freeze 2s, ESC quit.
"""

import logging
import math
import sys

import pygame

from tick_state import State, StateManager

# --- Configuration ---
WIDTH, HEIGHT = 800, 600
FPS = 60
TITLE = "tick-state demo"

WANDER_SPEED = 120.0
DASH_SPEED = 480.0
DASH_COST = 40.0
ENERGY_REGEN = 15.0
FREEZE_SECONDS = 2.0

BG_COLOR = (26, 26, 46)
HUD_COLOR = (200, 200, 220)
STATE_COLORS = {
    None: (90, 90, 90),
    "idle": (0, 255, 255),
    "wander": (0, 255, 100),
    "dash": (255, 160, 0),
}
FROZEN_OUTLINE = (255, 255, 255)


class Actor:
    def __init__(self) -> None:
        self.x = WIDTH / 2
        self.y = HEIGHT / 2
        self.heading = 0.0
        self.energy = 100.0
        self.dash_left = 0.0


def build_states(sm: StateManager, actor: Actor) -> None:
    def regen(dt: float) -> None:
        actor.energy = min(100.0, actor.energy + ENERGY_REGEN * dt)

    def wander(dt: float) -> None:
        regen(dt)
        actor.heading += 1.2 * dt
        actor.x = (actor.x + math.cos(actor.heading) * WANDER_SPEED * dt) % WIDTH
        actor.y = (actor.y + math.sin(actor.heading) * WANDER_SPEED * dt) % HEIGHT

    def dash_enter() -> None:
        actor.energy -= DASH_COST
        actor.dash_left = 0.3

    def dash(dt: float) -> None:
        actor.x = (actor.x + math.cos(actor.heading) * DASH_SPEED * dt) % WIDTH
        actor.y = (actor.y + math.sin(actor.heading) * DASH_SPEED * dt) % HEIGHT
        actor.dash_left -= dt
        if actor.dash_left <= 0 and not sm.frozen:
            sm.switch("wander")

    sm.add("idle", State(update=regen))
    sm.add("wander", State(update=wander))
    sm.add("dash", State(
        enter=dash_enter,
        update=dash,
        can_enter=lambda: actor.energy >= DASH_COST,
    ))


def main():
    logging.basicConfig(level=logging.INFO)
    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption(TITLE)
    pg_clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 14)

    actor = Actor()
    sm = StateManager()
    build_states(sm, actor)
    sm.switch("idle")

    key_states = {pygame.K_1: "idle", pygame.K_2: "wander", pygame.K_3: "dash"}

    running = True
    while running:
        dt = pg_clock.tick(FPS) / 1000.0

        # --- Events ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key in key_states:
                    sm.switch(key_states[event.key])
                elif event.key == pygame.K_f:
                    sm.freeze(FREEZE_SECONDS)

        # --- Update ---
        sm.update(dt)

        # --- Draw ---
        screen.fill(BG_COLOR)
        rect = pygame.Rect(0, 0, 40, 40)
        rect.center = (int(actor.x), int(actor.y))
        pygame.draw.rect(screen, STATE_COLORS.get(sm.current_id, STATE_COLORS[None]), rect)
        if sm.frozen:
            pygame.draw.rect(screen, FROZEN_OUTLINE, rect.inflate(8, 8), 2)

        hud = [
            f"state: {sm.current_id}",
            f"energy: {actor.energy:5.1f}",
            f"frozen: {sm.frozen}",
            "1 idle  2 wander  3 dash  F freeze  ESC quit",
        ]
        for i, line in enumerate(hud):
            screen.blit(font.render(line, True, HUD_COLOR), (10, 10 + i * 18))

        pygame.display.flip()

    sm.shutdown()
    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
