import pytest
from bedrock_chat_lib import ChatMessage, TextPart, ToolCallPart, ToolDeclaration, ToolResultPart
from bedrock_chat_lib.llm_core.exceptions import (
    InvalidRequestError,
    InvalidToolNameError,
    ToolPairingError,
)
from bedrock_chat_lib.llm_impl.bedrock import validate_request, validate_tools


def _call(call_id: str) -> ToolCallPart:
    return ToolCallPart(call_id=call_id, name="search", input={})


def _result(call_id: str) -> ToolResultPart:
    return ToolResultPart(call_id=call_id, content=[TextPart(value="ok")])


@pytest.mark.parametrize("name", ["search", "get_weather", "read-file", "Tool2"])
def test_valid_tool_names(name):
    validate_tools([ToolDeclaration(name=name)])


@pytest.mark.parametrize("name", ["has space", "dot.name", "slash/name", "", "ünïcode", "search\n", "\nsearch"])
def test_invalid_tool_names(name):
    with pytest.raises(InvalidToolNameError, match="Invalid tool name"):
        validate_tools([ToolDeclaration(name="ok"), ToolDeclaration(name=name)])


def test_invalid_tool_name_is_an_invalid_request():
    with pytest.raises(InvalidRequestError):
        validate_tools([ToolDeclaration(name="bad name")])


def test_empty_conversation_is_rejected():
    with pytest.raises(InvalidRequestError):
        validate_request([])


def test_plain_conversation_passes():
    validate_request([ChatMessage.user("hi"), ChatMessage.assistant("hello"), ChatMessage.user("bye")])


def test_answered_calls_pass():
    validate_request(
        [
            ChatMessage.user("find x"),
            ChatMessage.assistant("ok", _call("c1"), _call("c2")),
            ChatMessage.user(_result("c2")),
            ChatMessage.user(_result("c1")),
            ChatMessage.assistant("done"),
        ]
    )


def test_unanswered_trailing_call_fails():
    with pytest.raises(ToolPairingError, match="matching call id"):
        validate_request([ChatMessage.user("find x"), ChatMessage.assistant(_call("c1"))])


def test_call_followed_by_assistant_fails():
    with pytest.raises(ToolPairingError):
        validate_request([ChatMessage.assistant(_call("c1")), ChatMessage.assistant("hm")])


def test_text_interleaving_results_fails():
    with pytest.raises(ToolPairingError):
        validate_request([ChatMessage.assistant(_call("c1")), ChatMessage.user("wait", _result("c1"))])


def test_partially_answered_calls_fail():
    with pytest.raises(ToolPairingError):
        validate_request(
            [
                ChatMessage.assistant(_call("c1"), _call("c2")),
                ChatMessage.user(_result("c1")),
                ChatMessage.user("next question"),
            ]
        )


def test_pairing_error_is_an_invalid_request():
    with pytest.raises(InvalidRequestError):
        validate_request([ChatMessage.assistant(_call("c1"))])
