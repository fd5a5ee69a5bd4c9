from app_state import FileViewState


def begin_editing(state: FileViewState) -> None:
    if state.editing:
        return
    state.buffer = state.committed.copy()
    state.active_cell = None
    state.editing = True


def activate_cell(state: FileViewState, row: int, column: str) -> str:
    """Make (row, column) the only editable cell and return its buffered text."""
    if not state.editing:
        begin_editing(state)
    # validates before moving the cursor
    value = state.buffer.get_cell(row, column)
    state.active_cell = (row, column)
    return value


def update_cell(state: FileViewState, value) -> None:
    if state.active_cell is None:
        raise ValueError("No active cell")
    row, column = state.active_cell
    state.buffer.set_cell(row, column, value)


def deactivate_cell(state: FileViewState) -> None:
    # the buffer already holds the cell's value
    state.active_cell = None


def cancel_edits(state: FileViewState) -> None:
    state.buffer = state.committed.copy()
    state.active_cell = None
    state.editing = False
