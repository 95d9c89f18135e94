import json
import logging

import pytest
from bedrock_chat_lib import CollectingProgress, ToolCallPart
from bedrock_chat_lib.llm_impl.bedrock.tool_buffer import ToolCallBuffer, canonical_key, generate_call_id

ARGS = {"path": "src/main.py", "options": {"recursive": True, "depth": 2}, "tags": ["a", "b"]}


def _buffer_with_call(index: int = 0, name: str = "read_file", tool_use_id: str = "tu-1") -> ToolCallBuffer:
    buffer = ToolCallBuffer(model_id="test-model")
    buffer.start_tool_call(index, tool_use_id, name)
    return buffer


def test_canonical_key_ignores_key_order_and_whitespace():
    assert canonical_key("f", {"b": 1, "a": [1, 2]}) == canonical_key("f", json.loads('{ "a" : [1,2], "b":1 }'))
    assert canonical_key("f", {"a": 1}) != canonical_key("g", {"a": 1})


def test_generated_call_ids_are_unique():
    ids = {generate_call_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(call_id.startswith("call_") for call_id in ids)


@pytest.mark.parametrize("split", range(1, len(json.dumps(ARGS))))
def test_emits_exactly_once_regardless_of_split_point(split):
    """Tests that the call appears once, only after the object is complete."""
    text = json.dumps(ARGS)
    progress = CollectingProgress()
    buffer = _buffer_with_call()

    for fragment in (text[:split], text[split:]):
        buffer.append_args(0, fragment)
        buffer.try_emit(0, progress)
    buffer.try_emit(0, progress, force=True)
    buffer.emit_all(progress)

    assert progress.parts == [ToolCallPart(call_id="tu-1", name="read_file", input=ARGS)]


def test_char_by_char_stream_emits_once():
    text = json.dumps(ARGS)
    progress = CollectingProgress()
    buffer = _buffer_with_call()

    for i, char in enumerate(text):
        buffer.append_args(0, char)
        emitted = buffer.try_emit(0, progress)
        assert emitted == (i == len(text) - 1)

    assert len(progress.parts) == 1


def test_missing_tool_use_id_gets_generated_id():
    progress = CollectingProgress()
    buffer = _buffer_with_call(tool_use_id="")

    buffer.append_args(0, "{}")
    buffer.try_emit(0, progress)

    assert progress.parts[0].call_id.startswith("call_")


def test_unnamed_call_is_never_emitted():
    progress = CollectingProgress()
    buffer = _buffer_with_call(name="")

    buffer.append_args(0, "{}")

    assert buffer.try_emit(0, progress, force=True) is False
    assert progress.parts == []


def test_duplicate_calls_are_suppressed():
    progress = CollectingProgress()
    buffer = ToolCallBuffer()
    buffer.start_tool_call(0, "a", "search")
    buffer.start_tool_call(1, "b", "search")

    buffer.append_args(0, '{"q": "x", "limit": 3}')
    buffer.append_args(1, '{"limit":3,"q":"x"}')

    assert buffer.try_emit(0, progress) is True
    assert buffer.try_emit(1, progress) is True
    assert [part.call_id for part in progress.parts] == ["a"]


def test_integral_float_args_are_duplicates():
    progress = CollectingProgress()
    buffer = ToolCallBuffer()
    buffer.start_tool_call(0, "a", "scroll")
    buffer.start_tool_call(1, "b", "scroll")
    buffer.append_args(0, '{"x": 1}')
    buffer.append_args(1, '{"x": 1.0}')

    buffer.emit_all(progress)

    assert canonical_key("scroll", {"x": 1}) == canonical_key("scroll", {"x": 1.0})
    assert [part.call_id for part in progress.parts] == ["a"]


def test_same_name_with_different_args_is_not_a_duplicate():
    progress = CollectingProgress()
    buffer = ToolCallBuffer()
    buffer.start_tool_call(0, "a", "search")
    buffer.start_tool_call(1, "b", "search")
    buffer.append_args(0, '{"q": "x"}')
    buffer.append_args(1, '{"q": "y"}')

    buffer.emit_all(progress)

    assert [part.input for part in progress.parts] == [{"q": "x"}, {"q": "y"}]


def test_forced_invalid_json_is_logged_and_dropped(caplog):
    progress = CollectingProgress()
    buffer = _buffer_with_call()
    buffer.append_args(0, '{"path": "unterminated')

    with caplog.at_level(logging.ERROR):
        assert buffer.try_emit(0, progress, force=True) is False

    assert progress.parts == []
    assert buffer.open_indices == []
    assert "read_file" in caplog.text
    assert "test-model" in caplog.text

    caplog.clear()
    buffer.emit_all(progress)
    assert caplog.text == ""


def test_non_forced_invalid_json_stays_open():
    progress = CollectingProgress()
    buffer = _buffer_with_call()
    buffer.append_args(0, '{"a":')

    assert buffer.try_emit(0, progress) is False
    assert buffer.open_indices == [0]


def test_non_object_json_is_not_emitted():
    progress = CollectingProgress()
    buffer = _buffer_with_call()
    buffer.append_args(0, "[1, 2, 3]")

    assert buffer.try_emit(0, progress) is False
    assert progress.parts == []


def test_restart_of_completed_index_is_ignored():
    progress = CollectingProgress()
    buffer = _buffer_with_call()
    buffer.append_args(0, "{}")
    buffer.try_emit(0, progress)

    buffer.start_tool_call(0, "tu-2", "other")
    buffer.append_args(0, '{"x": 1}')
    buffer.emit_all(progress)

    assert len(progress.parts) == 1


def test_fragments_for_unknown_index_are_ignored():
    progress = CollectingProgress()
    buffer = ToolCallBuffer()

    buffer.append_args(5, '{"a": 1}')

    assert buffer.try_emit(5, progress, force=True) is False
    assert buffer.open_indices == []


def test_space_separator_bookkeeping():
    buffer = ToolCallBuffer()
    assert buffer.should_add_space_before_first_tool() is False

    buffer.mark_has_text()
    assert buffer.should_add_space_before_first_tool() is True

    buffer.mark_first_tool_emitted()
    assert buffer.should_add_space_before_first_tool() is False


def test_reset_clears_all_state():
    progress = CollectingProgress()
    buffer = _buffer_with_call()
    buffer.append_args(0, '{"a": 1}')
    buffer.try_emit(0, progress)
    buffer.mark_has_text()
    buffer.mark_first_tool_emitted()

    buffer.reset()

    buffer.start_tool_call(0, "tu-1", "read_file")
    buffer.append_args(0, '{"a": 1}')
    assert buffer.try_emit(0, progress) is True
    assert len(progress.parts) == 2
    assert buffer.should_add_space_before_first_tool() is False
