import threading

from app_state import (
    FileViewState,
    apply_load_failed,
    apply_loaded,
    close_file,
    open_file,
)
from file_type_handler import TabularContent
from locator import FileRef

A = FileRef("a", "a.csv", "o", "o/a.csv")
B = FileRef("b", "b.csv", "o", "o/b.csv")


def _content(value):
    return TabularContent.from_rows(["v"], [{"v": value}])


def test_loaded_content_seeds_buffer_copy():
    state = FileViewState()
    token = open_file(state, A)

    assert state.loading
    assert apply_loaded(state, A, token, _content("1"))
    assert not state.loading
    assert state.committed == state.buffer
    assert state.committed is not state.buffer


def test_result_for_previous_file_is_dropped():
    state = FileViewState()
    token_a = open_file(state, A)
    token_b = open_file(state, B)
    assert apply_loaded(state, B, token_b, _content("b"))

    assert not apply_loaded(state, A, token_a, _content("a"))
    assert state.file_ref == B
    assert state.committed.rows == [{"v": "b"}]


def test_reopening_same_file_drops_older_load():
    state = FileViewState()
    first = open_file(state, A)
    second = open_file(state, A)

    assert not apply_loaded(state, A, first, _content("old"))
    assert state.loading
    assert apply_loaded(state, A, second, _content("new"))
    assert state.committed.rows == [{"v": "new"}]


def test_failure_after_close_is_dropped():
    state = FileViewState()
    token = open_file(state, A)
    close_file(state)

    assert not apply_load_failed(state, A, token, "boom")
    assert state.load_error is None
    assert state.file_ref is None


def test_failure_sets_error():
    state = FileViewState()
    token = open_file(state, A)

    assert apply_load_failed(state, A, token, "Fetch failed (500) - nope")
    assert state.load_error == "Fetch failed (500) - nope"
    assert not state.loading


def test_open_during_apply_waits_for_it():
    state = FileViewState()
    token = open_file(state, A)
    opener = threading.Thread(target=open_file, args=(state, B))

    class SlowCopy(TabularContent):
        def copy(self):
            # open B while apply_loaded is mid-assignment
            opener.start()
            opener.join(0.2)
            return super().copy()

    content = SlowCopy(["v"], _content("a").df)
    assert apply_loaded(state, A, token, content)
    opener.join(5)

    assert state.file_ref == B
    assert state.loading
    assert state.committed.rows == []
    assert state.buffer.rows == []
