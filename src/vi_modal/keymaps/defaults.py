"""Built-in keymaps that seed each mode with its vi bindings."""

from __future__ import annotations

import string
from functools import partial
from typing import Callable

from vi_modal.actions import core as core_actions
from vi_modal.actions import normal as normal_actions
from vi_modal.actions import operator as operator_actions
from vi_modal.actions import visual as visual_actions
from vi_modal.engine.state import EditorMode, FindKind, Operator, TextObjectModifier

from .models import ActionRef, Binding, ModeKeymap
from .registry import KeymapRegistry


def _action(
    action_id: str,
    handler: Callable[..., object],
    description: str,
    *,
    preserves_count: bool = False,
    **params: object,
) -> ActionRef:
    return ActionRef(
        id=action_id,
        handler=partial(handler, **params) if params else handler,
        description=description,
        metadata={"preserves_count": preserves_count},
    )


_MOTIONS = {
    "left": "move_left",
    "down": "move_down",
    "up": "move_up",
    "right": "move_right",
    "word": "move_word_right",
    "word_back": "move_word_left",
    "line_end": "move_line_end",
    "doc_start": "move_document_start",
    "doc_end": "move_document_end",
    "matching_bracket": "go_to_matching_bracket",
}

_SELECTIONS = {
    "left": "select_left",
    "down": "select_down",
    "up": "select_up",
    "right": "select_right",
    "word": "select_word_right",
    "word_back": "select_word_left",
}

_BOUNDARY_SELECTIONS = {
    "line_start": "select_line_start",
    "line_end": "select_line_end",
    "doc_start": "select_document_start",
    "doc_end": "select_document_end",
}


DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    *(
        _action(
            f"count.digit_{digit}",
            core_actions.accumulate_digit,
            f"Append {digit} to the pending count",
            preserves_count=True,
            digit=digit,
        )
        for digit in range(1, 10)
    ),
    _action("core.return_to_normal", core_actions.return_to_normal, "Return to normal mode"),
    # normal-mode motions
    _action("normal.zero", normal_actions.line_start_or_digit, "Count digit or line start"),
    *(
        _action(f"motion.{name}", core_actions.run_counted_action, f"Move {name}", action=action)
        for name, action in _MOTIONS.items()
        if name not in ("line_end", "doc_start", "doc_end", "matching_bracket")
    ),
    _action("motion.page_down", core_actions.run_counted_action, "Page down", action="page_down"),
    _action("motion.page_up", core_actions.run_counted_action, "Page up", action="page_up"),
    _action("motion.line_end", core_actions.run_action, "Line end", action="move_line_end"),
    _action("motion.doc_start", core_actions.run_action, "Document start", action="move_document_start"),
    _action("motion.doc_end", core_actions.run_action, "Document end", action="move_document_end"),
    _action("motion.matching_bracket", core_actions.run_action, "Matching bracket", action="go_to_matching_bracket"),
    _action("motion.word_end", normal_actions.word_end, "End of word"),
    _action("motion.first_non_blank", normal_actions.first_non_blank, "First non-blank character"),
    _action("motion.half_page_down", normal_actions.half_page, "Half page down", down=True),
    _action("motion.half_page_up", normal_actions.half_page, "Half page up", down=False),
    _action("view.center_cursor", core_actions.run_action, "Center the cursor line", action="center_cursor"),
    _action("search.forward", core_actions.run_action, "Search forward", action="search"),
    _action("search.backward", core_actions.run_action, "Search backward", action="search"),
    _action("search.next", core_actions.run_action, "Next match", action="find_next"),
    _action("search.previous", core_actions.run_action, "Previous match", action="find_previous"),
    # find character
    *(
        _action(
            f"find.begin_{kind.value}",
            normal_actions.begin_find_char,
            f"Find character ({kind.value})",
            kind=kind,
        )
        for kind in FindKind
    ),
    _action("find.repeat", normal_actions.repeat_find_char, "Repeat last find", reverse=False),
    _action("find.repeat_reverse", normal_actions.repeat_find_char, "Repeat last find reversed", reverse=True),
    _action("find.complete", operator_actions.complete_find_char, "Find the typed character"),
    _action("find.cancel", operator_actions.cancel_find_char, "Cancel the find"),
    # insert entry
    _action("insert.before", normal_actions.insert_before, "Insert before the cursor"),
    _action("insert.after", normal_actions.insert_with, "Insert after the cursor", actions=("move_right",)),
    _action("insert.line_start", normal_actions.insert_with, "Insert at line start", actions=("move_line_start",)),
    _action("insert.line_end", normal_actions.insert_with, "Insert at line end", actions=("move_line_end",)),
    _action(
        "insert.open_below",
        normal_actions.insert_with,
        "Open a line below",
        actions=("move_line_end", "insert_newline"),
    ),
    _action(
        "insert.open_above",
        normal_actions.insert_with,
        "Open a line above",
        actions=("move_line_start", "insert_newline", "move_up"),
    ),
    # operators
    *(
        _action(
            f"operator.begin_{operator.value}",
            normal_actions.begin_operator,
            f"Start the {operator.name.lower()} operator",
            preserves_count=True,
            operator=operator,
        )
        for operator in Operator
    ),
    *(
        _action(
            f"operator.repeat_{operator.value}",
            operator_actions.repeat_operator,
            f"Apply {operator.name.lower()} to whole lines",
            operator=operator,
        )
        for operator in Operator
    ),
    *(
        _action(f"operator.{name}", operator_actions.apply_motion, f"Operator to {name}", motion=motion)
        for name, motion in _MOTIONS.items()
    ),
    _action("operator.zero", operator_actions.line_start_or_digit, "Count digit or operator to line start"),
    _action(
        "textobj.begin_inner",
        operator_actions.begin_text_object,
        "Inner text object",
        preserves_count=True,
        modifier=TextObjectModifier.INNER,
    ),
    _action(
        "textobj.begin_around",
        operator_actions.begin_text_object,
        "Around text object",
        preserves_count=True,
        modifier=TextObjectModifier.AROUND,
    ),
    _action("textobj.apply", operator_actions.apply_text_object, "Apply the operator to a text object"),
    # edits
    _action("edit.delete_char", normal_actions.delete_char, "Delete character", action="delete_forward"),
    _action("edit.delete_char_before", normal_actions.delete_char, "Delete character before", action="delete_backward"),
    _action("edit.substitute", normal_actions.substitute, "Substitute characters"),
    _action("edit.change_line", operator_actions.change_lines, "Change the whole line"),
    _action("edit.delete_to_end", normal_actions.to_line_end, "Delete to line end", operator=Operator.DELETE),
    _action("edit.change_to_end", normal_actions.to_line_end, "Change to line end", operator=Operator.CHANGE),
    _action("edit.replace_char", normal_actions.replace_char, "Replace character"),
    _action("edit.join", normal_actions.join_lines, "Join lines"),
    _action("edit.paste_after", normal_actions.paste, "Paste after", after=True),
    _action("edit.paste_before", normal_actions.paste, "Paste before", after=False),
    _action("edit.undo", core_actions.run_action, "Undo", action="undo"),
    _action("edit.redo", core_actions.run_action, "Redo", action="redo"),
    _action("edit.repeat", normal_actions.repeat_last_change, "Repeat last change"),
    _action("command.open", normal_actions.open_command_line, "Open the command line"),
    # visual
    *(
        _action(
            f"visual.enter_{mode.value}",
            visual_actions.enter_visual,
            f"Enter {mode.value} mode",
            preserves_count=True,
            mode=mode,
        )
        for mode in (EditorMode.VISUAL, EditorMode.VISUAL_LINE, EditorMode.VISUAL_BLOCK)
    ),
    *(
        _action(
            f"visual.switch_{mode.value}",
            visual_actions.switch_visual,
            f"Switch to {mode.value} mode",
            preserves_count=True,
            mode=mode,
        )
        for mode in (EditorMode.VISUAL, EditorMode.VISUAL_LINE, EditorMode.VISUAL_BLOCK)
    ),
    *(
        _action(f"visual.{name}", visual_actions.extend_selection, f"Extend {name}", action=action)
        for name, action in _SELECTIONS.items()
    ),
    *(
        _action(f"visual.{name}", visual_actions.extend_once, f"Extend to {name}", action=action)
        for name, action in _BOUNDARY_SELECTIONS.items()
    ),
    _action("visual.word_end", visual_actions.extend_word_end, "Extend to word end"),
    _action("visual.line_down", visual_actions.extend_lines, "Extend by lines downward", down=True),
    _action("visual.line_up", visual_actions.extend_lines, "Extend by lines upward", down=False),
    _action("visual.line_doc_start", visual_actions.extend_to_boundary, "Extend to first line", end=False),
    _action("visual.line_doc_end", visual_actions.extend_to_boundary, "Extend to last line", end=True),
    *(
        _action(
            f"visual.{operator.name.lower()}",
            visual_actions.apply_operator,
            f"{operator.name.capitalize()} the selection",
            operator=operator,
        )
        for operator in Operator
    ),
)


def _digits() -> tuple[tuple[str, str, str], ...]:
    return tuple((str(digit), f"digit_{digit}", f"count.digit_{digit}") for digit in range(1, 10))


_VISUAL_OPERATORS = (
    ("d", "delete", "visual.delete"),
    ("x", "delete_x", "visual.delete"),
    ("c", "change", "visual.change"),
    ("s", "change_s", "visual.change"),
    ("y", "yank", "visual.yank"),
)

_OBJECT_NAMES = {
    "w": "word",
    "W": "WORD",
    '"': "dquote",
    "'": "squote",
    "`": "backtick",
    "(": "paren_open",
    ")": "paren_close",
    "b": "paren",
    "{": "brace_open",
    "}": "brace_close",
    "B": "brace",
    "[": "bracket_open",
    "]": "bracket_close",
    "<": "angle_open",
    ">": "angle_close",
}

_FIND_TARGETS = string.ascii_lowercase + string.ascii_uppercase + string.digits


NORMAL_KEYMAP = ModeKeymap(
    mode=EditorMode.NORMAL.value,
    bindings=(
        *_digits(),
        ("0", "digit_0_or_line_start", "normal.zero"),
        ("h", "left", "motion.left"),
        ("j", "down", "motion.down"),
        ("k", "up", "motion.up"),
        ("l", "right", "motion.right"),
        ("w", "word", "motion.word"),
        ("b", "word_back", "motion.word_back"),
        ("e", "word_end", "motion.word_end"),
        ("$", "line_end", "motion.line_end"),
        ("^", "first_non_blank", "motion.first_non_blank"),
        ("g g", "doc_start", "motion.doc_start"),
        ("G", "doc_end", "motion.doc_end"),
        ("C-f", "page_down", "motion.page_down"),
        ("C-b", "page_up", "motion.page_up"),
        ("C-d", "half_page_down", "motion.half_page_down"),
        ("C-u", "half_page_up", "motion.half_page_up"),
        ("%", "matching_bracket", "motion.matching_bracket"),
        ("z z", "center_cursor", "view.center_cursor"),
        ("/", "search_forward", "search.forward"),
        ("?", "search_backward", "search.backward"),
        ("n", "find_next", "search.next"),
        ("N", "find_prev", "search.previous"),
        ("f", "find_char_f", "find.begin_f"),
        ("t", "find_char_t", "find.begin_t"),
        ("F", "find_char_F", "find.begin_F"),
        ("T", "find_char_T", "find.begin_T"),
        (";", "find_char_repeat", "find.repeat"),
        (",", "find_char_repeat_reverse", "find.repeat_reverse"),
        ("i", "insert_before", "insert.before"),
        ("a", "insert_after", "insert.after"),
        ("I", "insert_line_start", "insert.line_start"),
        ("A", "insert_line_end", "insert.line_end"),
        ("o", "open_below", "insert.open_below"),
        ("O", "open_above", "insert.open_above"),
        ("Escape", "escape", "core.return_to_normal"),
        ("d", "delete_operator", "operator.begin_d"),
        ("c", "change_operator", "operator.begin_c"),
        ("y", "yank_operator", "operator.begin_y"),
        ("x", "delete_char", "edit.delete_char"),
        ("X", "delete_char_before", "edit.delete_char_before"),
        ("r", "replace_char", "edit.replace_char"),
        ("s", "substitute", "edit.substitute"),
        ("S", "change_line", "edit.change_line"),
        ("D", "delete_to_end", "edit.delete_to_end"),
        ("C", "change_to_end", "edit.change_to_end"),
        ("p", "paste_after", "edit.paste_after"),
        ("P", "paste_before", "edit.paste_before"),
        ("u", "undo", "edit.undo"),
        ("C-r", "redo", "edit.redo"),
        (".", "repeat", "edit.repeat"),
        ("v", "visual_char", "visual.enter_visual"),
        ("V", "visual_line", "visual.enter_visual-line"),
        ("C-v", "visual_block", "visual.enter_visual-block"),
        ("J", "join", "edit.join"),
        (":", "command_mode", "command.open"),
    ),
)

INSERT_KEYMAP = ModeKeymap(
    mode=EditorMode.INSERT.value,
    bindings=(("Escape", "escape", "core.return_to_normal"),),
    read_only=False,
)

FIND_CHAR_KEYMAP = ModeKeymap(
    mode=EditorMode.FIND_CHAR.value,
    bindings=(
        ("Escape", "cancel", "find.cancel"),
        *((char, f"char_{char}", "find.complete") for char in _FIND_TARGETS),
        ("Space", "char_space", "find.complete"),
    ),
)

OPERATOR_PENDING_KEYMAP = ModeKeymap(
    mode=EditorMode.OPERATOR_PENDING.value,
    bindings=(
        *_digits(),
        ("0", "digit_0_or_line_start", "operator.zero"),
        ("h", "left", "operator.left"),
        ("j", "down", "operator.down"),
        ("k", "up", "operator.up"),
        ("l", "right", "operator.right"),
        ("w", "word", "operator.word"),
        ("b", "word_back", "operator.word_back"),
        ("$", "line_end", "operator.line_end"),
        ("g g", "doc_start", "operator.doc_start"),
        ("G", "doc_end", "operator.doc_end"),
        ("%", "matching_bracket", "operator.matching_bracket"),
        ("i", "text_object_inner", "textobj.begin_inner"),
        ("a", "text_object_around", "textobj.begin_around"),
        ("d", "delete_line", "operator.repeat_d"),
        ("c", "change_line", "operator.repeat_c"),
        ("y", "yank_line", "operator.repeat_y"),
        ("Escape", "cancel", "core.return_to_normal"),
    ),
)

TEXT_OBJECT_KEYMAP = ModeKeymap(
    mode=EditorMode.TEXT_OBJECT.value,
    bindings=(
        *((key, name, "textobj.apply") for key, name in _OBJECT_NAMES.items()),
        ("Escape", "cancel", "core.return_to_normal"),
    ),
)

VISUAL_KEYMAP = ModeKeymap(
    mode=EditorMode.VISUAL.value,
    bindings=(
        *_digits(),
        ("0", "line_start", "visual.line_start"),
        ("h", "left", "visual.left"),
        ("j", "down", "visual.down"),
        ("k", "up", "visual.up"),
        ("l", "right", "visual.right"),
        ("w", "word", "visual.word"),
        ("b", "word_back", "visual.word_back"),
        ("e", "word_end", "visual.word_end"),
        ("$", "line_end", "visual.line_end"),
        ("^", "first_non_blank", "visual.line_start"),
        ("g g", "doc_start", "visual.doc_start"),
        ("G", "doc_end", "visual.doc_end"),
        ("V", "toggle_line", "visual.switch_visual-line"),
        ("C-v", "toggle_block", "visual.switch_visual-block"),
        *_VISUAL_OPERATORS,
        ("Escape", "escape", "core.return_to_normal"),
        ("v", "exit", "core.return_to_normal"),
    ),
)

VISUAL_LINE_KEYMAP = ModeKeymap(
    mode=EditorMode.VISUAL_LINE.value,
    bindings=(
        *_digits(),
        ("j", "down", "visual.line_down"),
        ("k", "up", "visual.line_up"),
        ("g g", "doc_start", "visual.line_doc_start"),
        ("G", "doc_end", "visual.line_doc_end"),
        ("v", "toggle_char", "visual.switch_visual"),
        ("C-v", "toggle_block", "visual.switch_visual-block"),
        *_VISUAL_OPERATORS,
        ("Escape", "escape", "core.return_to_normal"),
        ("V", "exit", "core.return_to_normal"),
    ),
)

VISUAL_BLOCK_KEYMAP = ModeKeymap(
    mode=EditorMode.VISUAL_BLOCK.value,
    bindings=(
        *_digits(),
        ("0", "line_start", "visual.line_start"),
        ("h", "left", "visual.left"),
        ("j", "down", "visual.down"),
        ("k", "up", "visual.up"),
        ("l", "right", "visual.right"),
        ("$", "line_end", "visual.line_end"),
        ("^", "first_non_blank", "visual.line_start"),
        ("v", "toggle_char", "visual.switch_visual"),
        ("V", "toggle_line", "visual.switch_visual-line"),
        *_VISUAL_OPERATORS,
        ("Escape", "escape", "core.return_to_normal"),
        ("C-v", "exit", "core.return_to_normal"),
    ),
)

DEFAULT_KEYMAPS: tuple[ModeKeymap, ...] = (
    NORMAL_KEYMAP,
    INSERT_KEYMAP,
    FIND_CHAR_KEYMAP,
    OPERATOR_PENDING_KEYMAP,
    TEXT_OBJECT_KEYMAP,
    VISUAL_KEYMAP,
    VISUAL_LINE_KEYMAP,
    VISUAL_BLOCK_KEYMAP,
)

DEFAULT_BINDINGS: tuple[Binding, ...] = tuple(
    binding for keymap in DEFAULT_KEYMAPS for binding in keymap.iter_bindings()
)


def load_default_keymaps(registry: KeymapRegistry) -> None:
    """Register every built-in action, then every mode's bindings."""

    for action in DEFAULT_ACTIONS:
        registry.register_action(action)
    for binding in DEFAULT_BINDINGS:
        registry.register_binding(binding)


__all__ = [
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "DEFAULT_KEYMAPS",
    "load_default_keymaps",
]
