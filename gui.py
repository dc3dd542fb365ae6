# gui.py
# Window, palette and main loop of the step viewer

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import pygame

from config import CFG

logger = logging.getLogger(__name__)

TOP_BAR_HEIGHT = 120

# Colors – higher contrast, refined dark mode
BG = (15, 15, 17)
CARD_BG = (30, 30, 34)
GRID = (90, 90, 95)
TEXT_MAIN = (245, 245, 250)
TEXT_SECONDARY = (230, 230, 235)
BUTTON_HOVER = (50, 50, 55)

SOLVED = (60, 200, 80)
BACKTRACKED = (250, 80, 80)


def draw_top_bar(
    screen: pygame.Surface,
    title_font: pygame.font.Font,
    label_font: pygame.font.Font,
    title: str,
    current_step: int,
    total_steps: int,
    solved: bool,
):
    w = screen.get_width()
    pygame.draw.rect(screen, BG, (0, 0, w, TOP_BAR_HEIGHT))

    card_rect = pygame.Rect(16, 16, w - 32, TOP_BAR_HEIGHT - 32)
    pygame.draw.rect(screen, CARD_BG, card_rect, border_radius=16)
    if solved:
        pygame.draw.rect(screen, SOLVED, card_rect, width=2, border_radius=16)

    title_surf = title_font.render(title, True, TEXT_MAIN)
    screen.blit(title_surf, (card_rect.x + 20, card_rect.y + 12))

    step_text = f"Step {current_step + 1} of {total_steps}"
    step_surf = label_font.render(step_text, True, TEXT_SECONDARY)
    screen.blit(step_surf, (card_rect.right - step_surf.get_width() - 20, card_rect.y + 12))


def draw_button(
    screen: pygame.Surface,
    rect: pygame.Rect,
    text: str,
    font: pygame.font.Font,
) -> None:
    color = CARD_BG
    if rect.collidepoint(pygame.mouse.get_pos()):
        color = BUTTON_HOVER

    pygame.draw.rect(screen, color, rect, border_radius=8)
    pygame.draw.rect(screen, GRID, rect, width=1, border_radius=8)

    label = font.render(text, True, TEXT_MAIN)
    screen.blit(label, label.get_rect(center=rect.center))


def run_viewer(
    solver,
    column_labels: Optional[List[str]] = None,
    row_labels: Optional[List[str]] = None,
    title: str = "Dancing Links",
    size: Optional[Tuple[int, int]] = None,
) -> None:
    """Open a window replaying the search up to its first solution."""
    from ui_viz import VizState, draw_viz, handle_viz_input

    viz_state = VizState(solver, column_labels, row_labels, max_steps=CFG.VIEW_MAX_STEPS)
    viz_state.play_speed = CFG.VIEW_STEP_DELAY

    pygame.init()
    width, height = size or (CFG.VIEW_WIDTH, CFG.VIEW_HEIGHT)
    screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
    pygame.display.set_caption(title)

    title_font = pygame.font.SysFont("SF Pro Display", 28, bold=True)
    body_font = pygame.font.SysFont("SF Pro Text", 16)

    clock = pygame.time.Clock()
    running = True
    while running:
        dt = clock.tick(60) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)

            action = handle_viz_input(event, viz_state, screen.get_size())
            if action == "prev":
                viz_state.step_backward()
            elif action == "next":
                viz_state.step_forward()
            elif action == "toggle":
                viz_state.toggle_play()
            elif action == "quit":
                running = False

        viz_state.update(dt)
        draw_viz(screen, title_font, body_font, viz_state, title=title)
        pygame.display.flip()

    logger.info("viewer closed at step %d of %d", viz_state.current_step + 1, viz_state.total_steps)
    pygame.quit()
