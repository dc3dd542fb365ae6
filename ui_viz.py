import pygame
from contextlib import closing
from typing import List, Dict, Any, Optional

from gui import (
    TOP_BAR_HEIGHT, BG, CARD_BG, GRID, TEXT_MAIN, TEXT_SECONDARY, SOLVED, BACKTRACKED,
    draw_top_bar, draw_button,
)

MATRIX_BG = (10, 10, 12)
MATRIX_HEADER_BG = (20, 20, 25)
MATRIX_ROW_SELECTED = (40, 50, 40)
MATRIX_GRID = (40, 40, 45)
MATRIX_COVERED = (28, 28, 32)
CELL_ON = (100, 100, 255)
CELL_SELECTED = (255, 200, 50)
ACTIVE_COL = (255, 200, 50)

CELL_PX = 22
HEADER_HEIGHT = 50
ROW_LABEL_WIDTH = 80
NARRATIVE_HEIGHT = 110
CONTROLS_HEIGHT = 50
BUTTONS = [("<<", "prev"), ("PLAY", "toggle"), (">>", "next")]


def get_narrative_text(event: Dict[str, Any], state: 'VizState') -> List[str]:
    """Short description of what the search is doing at this event."""
    etype = event["type"]
    data = event.get("data", {})

    if etype == "INIT":
        return [
            "INITIALIZING",
            f"{data.get('columns', 0)} columns, {data.get('rows', 0)} rows.",
            "Every column must be covered by exactly one chosen row.",
        ]
    if etype == "CHOOSE_COL":
        col = data["chosen"]
        return [
            "ANALYZING",
            f"Column {col} ({state.column_label(col)}) has the fewest options ({data['size']}).",
            "Minimizing the branching factor is key.",
        ]
    if etype == "COVER_COL":
        return ["COVERING", f"Column {data['col']} leaves the header ring with every row that meets it."]
    if etype == "SELECT_ROW":
        return [
            "DECIDING",
            f"Trying {state.row_label(data['row'])}.",
            f"It also covers columns {', '.join(str(c) for c in data.get('cols', []))}.",
        ]
    if etype == "UNSELECT_ROW":
        return ["REVERSING", f"Removing {state.row_label(data['row'])}.", "Let's try the next option instead."]
    if etype == "UNCOVER_COL":
        return ["UNCOVERING", f"Column {data['col']} is restored."]
    if etype == "BACKTRACK":
        return ["BACKTRACKING", f"Column {data['col']}: {data.get('reason', '')}.", "Going back up the tree..."]
    if etype == "SOLUTION":
        return ["SOLVED", "Every column is covered exactly once.", f"Rows: {' '.join(map(str, data['solution']))}"]
    if etype == "DONE":
        return ["DONE", f"{data.get('solutions', 0)} solutions in total."]
    return [etype]


class VizState:
    def __init__(
        self,
        solver,
        column_labels: Optional[List[str]] = None,
        row_labels: Optional[List[str]] = None,
        max_steps: int = 20000,
    ):
        graph = solver.graph
        self.num_columns = graph.num_columns
        self.column_labels = column_labels or [str(c) for c in range(graph.num_columns)]
        self._row_labels = row_labels

        # Row -> columns, read straight from the data nodes
        self.row_cols: Dict[int, List[int]] = {}
        for node in range(graph.num_columns + 1, len(graph)):
            self.row_cols.setdefault(graph.row_id[node], []).append(graph.col_id[node])
        self.rows = sorted(self.row_cols)
        self.row_position = {row_id: i for i, row_id in enumerate(self.rows)}

        # Record the trace up to the first solution; closing the generator
        # uncovers whatever is still covered.
        raw: List[Dict[str, Any]] = []
        with closing(solver.solve_steps()) as steps:
            for event in steps:
                raw.append(event)
                if event["type"] in ("SOLUTION", "DONE") or len(raw) >= max_steps:
                    break
        self.history = self.process_history(raw)

        self.total_steps = len(self.history)
        self.current_step = 0
        self.playing = False
        self.play_speed = 0.1
        self.timer = 0.0

        self.scroll_row_idx = 0.0
        self.scroll_col_idx = 0.0

        self.current_narrative: List[str] = []
        self.set_step(0)

    def column_label(self, col: int) -> str:
        if 0 <= col < len(self.column_labels):
            return self.column_labels[col]
        return str(col)

    def row_label(self, row_id: int) -> str:
        if self._row_labels and 0 <= row_id < len(self._row_labels):
            return self._row_labels[row_id]
        return f"row {row_id}"

    def process_history(self, raw_events: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Attach the set of covered columns and the active column to every event."""
        processed = []
        chosen_stack: List[int] = []
        active: Optional[int] = None

        for event in raw_events:
            etype = event["type"]
            data = event.get("data", {})

            if etype == "CHOOSE_COL":
                active = data["chosen"]
            elif etype == "COVER_COL":
                chosen_stack.append(data["col"])
            elif etype == "UNCOVER_COL" and chosen_stack:
                chosen_stack.pop()
                active = chosen_stack[-1] if chosen_stack else None

            covered = set(chosen_stack)
            for row_id in event.get("state", []):
                covered.update(self.row_cols.get(row_id, []))

            event = dict(event)
            event["covered"] = covered
            event["active_col"] = active
            processed.append(event)

        return processed

    def update(self, dt: float):
        if self.playing and self.current_step < self.total_steps - 1:
            self.timer += dt
            if self.timer >= self.play_speed:
                self.timer = 0.0
                self.set_step(self.current_step + 1)
        elif self.current_step >= self.total_steps - 1:
            self.playing = False

    def set_step(self, step: int):
        step = max(0, min(self.total_steps - 1, step))
        self.current_step = step
        self.current_event = self.history[step]
        self.current_narrative = get_narrative_text(self.current_event, self)

        # Keep the focused row in view
        row_id = self.current_event.get("data", {}).get("row")
        if row_id is not None and row_id in self.row_position:
            self.scroll_row_idx = float(max(0, self.row_position[row_id] - 5))

    def step_forward(self):
        if self.current_step < self.total_steps - 1:
            self.set_step(self.current_step + 1)

    def step_backward(self):
        if self.current_step > 0:
            self.set_step(self.current_step - 1)

    def toggle_play(self):
        self.playing = not self.playing

    def scroll_x(self, dx: float):
        self.scroll_col_idx = max(0.0, min(max(0, self.num_columns - 1), self.scroll_col_idx + dx))

    def scroll_y(self, dy: float):
        self.scroll_row_idx = max(0.0, min(max(0, len(self.rows) - 1), self.scroll_row_idx + dy))


def _controls_rects(screen_size: tuple[int, int]) -> List[tuple[pygame.Rect, str]]:
    w, _ = screen_size
    y = TOP_BAR_HEIGHT + NARRATIVE_HEIGHT + 8
    start_x = (w - len(BUTTONS) * 80) // 2
    rects = []
    for _, action in BUTTONS:
        rects.append((pygame.Rect(start_x, y, 60, 30), action))
        start_x += 80
    return rects


def draw_matrix(screen: pygame.Surface, rect: pygame.Rect, state: VizState, font: pygame.font.Font):
    pygame.draw.rect(screen, MATRIX_BG, rect)

    event = state.current_event
    covered = event["covered"]
    selected = set(event.get("state", []))
    active = event["active_col"]

    first_col = int(state.scroll_col_idx)
    first_row = int(state.scroll_row_idx)
    visible_cols = max(0, (rect.width - ROW_LABEL_WIDTH) // CELL_PX)
    visible_rows = max(0, (rect.height - HEADER_HEIGHT) // CELL_PX)
    cols = range(first_col, min(state.num_columns, first_col + visible_cols))
    rows = state.rows[first_row:first_row + visible_rows]

    # Column header
    pygame.draw.rect(screen, MATRIX_HEADER_BG, (rect.x, rect.y, rect.width, HEADER_HEIGHT))
    for i, col in enumerate(cols):
        x = rect.x + ROW_LABEL_WIDTH + i * CELL_PX
        color = TEXT_SECONDARY if col not in covered else GRID
        lbl = font.render(str(col), True, color)
        screen.blit(lbl, lbl.get_rect(center=(x + CELL_PX // 2, rect.y + HEADER_HEIGHT // 2)))
        if col == active:
            pygame.draw.rect(screen, ACTIVE_COL, (x, rect.y + 4, CELL_PX, rect.height - 8), width=2)

    # Rows
    for j, row_id in enumerate(rows):
        y = rect.y + HEADER_HEIGHT + j * CELL_PX
        if row_id in selected:
            pygame.draw.rect(screen, MATRIX_ROW_SELECTED, (rect.x, y, rect.width, CELL_PX))

        lbl = font.render(str(row_id), True, TEXT_MAIN if row_id in selected else TEXT_SECONDARY)
        screen.blit(lbl, (rect.x + 8, y + (CELL_PX - lbl.get_height()) // 2))

        row_set = set(state.row_cols[row_id])
        for i, col in enumerate(cols):
            x = rect.x + ROW_LABEL_WIDTH + i * CELL_PX
            cell = pygame.Rect(x + 2, y + 2, CELL_PX - 4, CELL_PX - 4)
            if col in covered:
                pygame.draw.rect(screen, MATRIX_COVERED, cell)
            if col in row_set:
                color = CELL_SELECTED if row_id in selected else CELL_ON
                pygame.draw.rect(screen, color, cell, border_radius=4)
            else:
                pygame.draw.rect(screen, MATRIX_GRID, cell, width=1)


def draw_viz(
    screen: pygame.Surface,
    font_title: pygame.font.Font,
    font_body: pygame.font.Font,
    state: VizState,
    title: str = "Dancing Links",
):
    w, h = screen.get_size()
    screen.fill(BG)

    event = state.current_event
    draw_top_bar(
        screen, font_title, font_body, title,
        state.current_step, state.total_steps,
        solved=event["type"] == "SOLUTION",
    )

    # Narrative
    text_rect = pygame.Rect(16, TOP_BAR_HEIGHT, w - 32, NARRATIVE_HEIGHT - 8)
    pygame.draw.rect(screen, CARD_BG, text_rect, border_radius=12)
    y = text_rect.y + 10
    for i, line in enumerate(state.current_narrative):
        if i == 0:
            color = BACKTRACKED if event["type"] == "BACKTRACK" else SOLVED if event["type"] == "SOLUTION" else TEXT_MAIN
        else:
            color = TEXT_SECONDARY
        screen.blit(font_body.render(line, True, color), (text_rect.x + 16, y))
        y += 22

    # Controls
    for btn_rect, action in _controls_rects((w, h)):
        label = next(text for text, a in BUTTONS if a == action)
        if action == "toggle" and state.playing:
            label = "PAUSE"
        draw_button(screen, btn_rect, label, font_body)

    top = TOP_BAR_HEIGHT + NARRATIVE_HEIGHT + CONTROLS_HEIGHT
    draw_matrix(screen, pygame.Rect(0, top, w, h - top), state, font_body)


def handle_viz_input(event: pygame.event.Event, state: VizState, screen_size: tuple[int, int]) -> str | None:
    """Maps keys and clicks to viewer actions; scrolls the matrix in place."""
    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return "quit"
        if event.key == pygame.K_LEFT:
            return "prev"
        if event.key == pygame.K_RIGHT:
            return "next"
        if event.key == pygame.K_SPACE:
            return "toggle"

    elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        for btn_rect, action in _controls_rects(screen_size):
            if btn_rect.collidepoint(event.pos):
                return action

    elif event.type == pygame.MOUSEWHEEL:
        if pygame.key.get_mods() & pygame.KMOD_SHIFT:
            state.scroll_x(event.y * -1)
        else:
            state.scroll_y(event.y * -1)

    return None
