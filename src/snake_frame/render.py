from __future__ import annotations

from .models import GameSnapshot

HEAD_CELL = "🐍"
BODY_CELL = "🟩"
FOOD_CELL = "🎩"
EMPTY_CELL = "⬛"


def render_board(snapshot: GameSnapshot) -> str:
    body = set(snapshot.snake[1:])
    rows: list[str] = []
    for y in range(snapshot.grid_size):
        cells: list[str] = []
        for x in range(snapshot.grid_size):
            cell = (x, y)
            if cell == snapshot.head:
                cells.append(HEAD_CELL)
            elif cell in body:
                cells.append(BODY_CELL)
            elif cell == snapshot.food:
                cells.append(FOOD_CELL)
            else:
                cells.append(EMPTY_CELL)
        rows.append("".join(cells))
    return f"{render_status(snapshot)}\n" + "\n".join(rows)


def render_status(snapshot: GameSnapshot) -> str:
    status = f"Score: {snapshot.score}"
    if snapshot.won:
        return f"{status} | Board cleared!"
    if snapshot.game_over:
        return f"{status} | Game Over!"
    return status
