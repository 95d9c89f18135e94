"""Adapt generic tool declarations into the Converse ``toolConfig`` structure."""

from typing import Any, Dict, Optional

from bedrock_chat_lib.llm_core.exceptions import ToolChoiceError
from bedrock_chat_lib.llm_core.logger import get_logger
from bedrock_chat_lib.llm_core.tools import RequestOptions, ToolDeclaration
from .profiles import get_model_profile
from .schema_sanitizer import sanitize_function_name, sanitize_tool_schema

logger = get_logger(__name__)


def convert_tool(tool: ToolDeclaration) -> Dict[str, Any]:
    """Builds a single ``toolSpec`` entry with a sanitized name and input schema."""
    return {
        "toolSpec": {
            "name": sanitize_function_name(tool.name),
            "description": tool.description if isinstance(tool.description, str) else "",
            "inputSchema": {"json": sanitize_tool_schema(tool.input_schema)},
        }
    }


def convert_tools(options: RequestOptions, model_id: str) -> Optional[Dict[str, Any]]:
    """
    Converts the request's tools and tool mode into a Converse tool configuration.

    Args:
        options: Request options carrying the tool declarations and tool mode.
        model_id: Bedrock model id; selects whether ``toolChoice`` is sent.

    Returns:
        The ``toolConfig`` dictionary, or None if no tools were declared.

    Raises:
        ToolChoiceError: If the tool mode is ``required`` but more than one tool is declared.
    """
    tools = options.tools
    if not tools:
        return None

    profile = get_model_profile(model_id)
    tool_config: Dict[str, Any] = {"tools": [convert_tool(tool) for tool in tools]}

    if profile.supports_tool_choice:
        if options.tool_mode == "required":
            if len(tools) != 1:
                msg = f"Tool mode 'required' is not supported with more than one tool (got {len(tools)})."
                logger.error(msg)
                raise ToolChoiceError(msg)
            tool_config["toolChoice"] = {"tool": {"name": sanitize_function_name(tools[0].name)}}
        else:
            tool_config["toolChoice"] = {"auto": {}}

    logger.debug(f"Converted {len(tools)} tool(s) for model '{model_id}'.")
    return tool_config
