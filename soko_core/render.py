from .board import StaticBoard
from .state import BoardState


def render_ascii(board: StaticBoard, state: BoardState) -> str:
    """ASCII visualization of the state."""
    out_lines = []
    for y in range(board.height):
        row_chars = []
        for x in range(board.width):
            idx = board.idx(x, y)
            if board.is_wall(idx):
                row_chars.append('#')
                continue
            has_goal = board.is_goal(idx)
            if idx == state.player:
                row_chars.append('+' if has_goal else '@')
            elif state.has_crate(idx):
                row_chars.append('*' if has_goal else '$')
            else:
                row_chars.append('.' if has_goal else ' ')
        out_lines.append(''.join(row_chars).rstrip())
    return "\n".join(out_lines)


def render_dead(board: StaticBoard) -> str:
    """Static board with dead tiles marked 'x' (debugging aid)."""
    out_lines = []
    for y in range(board.height):
        row = []
        for x in range(board.width):
            idx = board.idx(x, y)
            if board.is_wall(idx):
                row.append('#')
            elif board.is_dead(idx):
                row.append('x')
            elif board.is_goal(idx):
                row.append('.')
            else:
                row.append(' ')
        out_lines.append(''.join(row).rstrip())
    return "\n".join(out_lines)
