import unittest

import cell_editor
from app_state import FileViewState, apply_loaded, open_file
from file_type_handler import FileTypeHandler
from locator import FileRef

PEOPLE_CSV = "name,age\nAlice,30\nBob,\n"


def _loaded_state():
    ref = FileRef("1", "people.csv", "owner", "owner/people.csv")
    state = FileViewState()
    token = open_file(state, ref)
    apply_loaded(state, ref, token, FileTypeHandler(ref.name).parse(PEOPLE_CSV))
    return state


class CellEditorTests(unittest.TestCase):
    def test_activate_seeds_from_buffer(self):
        state = _loaded_state()
        cell_editor.begin_editing(state)

        value = cell_editor.activate_cell(state, 0, "name")

        self.assertEqual(value, "Alice")
        self.assertEqual(state.active_cell, (0, "name"))
        self.assertTrue(state.editing)

    def test_update_touches_only_active_cell(self):
        state = _loaded_state()
        cell_editor.activate_cell(state, 1, "age")

        cell_editor.update_cell(state, "25")

        self.assertEqual(
            state.buffer_rows(),
            [{"name": "Alice", "age": "30"}, {"name": "Bob", "age": "25"}],
        )
        # committed copy is untouched until a save
        self.assertEqual(state.committed.rows[1], {"name": "Bob", "age": ""})

    def test_second_activation_keeps_first_value(self):
        state = _loaded_state()
        cell_editor.activate_cell(state, 0, "age")
        cell_editor.update_cell(state, "31")

        cell_editor.activate_cell(state, 1, "name")

        self.assertEqual(state.active_cell, (1, "name"))
        self.assertEqual(state.buffer.get_cell(0, "age"), "31")

    def test_deactivate_keeps_value(self):
        state = _loaded_state()
        cell_editor.activate_cell(state, 0, "name")
        cell_editor.update_cell(state, "Alicia")

        cell_editor.deactivate_cell(state)

        self.assertIsNone(state.active_cell)
        self.assertEqual(state.buffer.get_cell(0, "name"), "Alicia")
        self.assertTrue(state.editing)

    def test_cancel_restores_committed(self):
        state = _loaded_state()
        original = state.committed.rows
        cell_editor.activate_cell(state, 1, "age")
        cell_editor.update_cell(state, "25")
        cell_editor.activate_cell(state, 0, "name")
        cell_editor.update_cell(state, "Zed")

        cell_editor.cancel_edits(state)

        self.assertEqual(state.buffer_rows(), original)
        self.assertEqual(state.buffer_rows(), [{"name": "Alice", "age": "30"}, {"name": "Bob", "age": ""}])
        self.assertIsNone(state.active_cell)
        self.assertFalse(state.editing)

    def test_invalid_cell_leaves_cursor(self):
        state = _loaded_state()
        cell_editor.activate_cell(state, 0, "name")

        with self.assertRaises(IndexError):
            cell_editor.activate_cell(state, 5, "name")
        with self.assertRaises(KeyError):
            cell_editor.activate_cell(state, 0, "email")

        self.assertEqual(state.active_cell, (0, "name"))

    def test_update_without_active_cell(self):
        state = _loaded_state()
        cell_editor.begin_editing(state)

        with self.assertRaises(ValueError):
            cell_editor.update_cell(state, "x")


if __name__ == "__main__":
    unittest.main()
