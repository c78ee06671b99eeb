"""Tool system for LLM-driven conflict chunk resolution."""

import time
from functools import wraps

from pydantic_ai import RunContext
from pydantic_ai.exceptions import ModelRetry

from mergechunks.core.log import logger
from mergechunks.tools.chunks import (
    find_merge_conflicts,
    has_merge_conflicts,
    replace_conflict_chunk,
    resolve_conflict_chunk,
    view_conflict_chunks,
)
from mergechunks.tools.workspace import Workspace


def _log_tool_execution(func):
    """Log every tool call: invocation, result, retry or failure.

    ModelRetry is logged as a warning since the model is expected to
    correct itself; anything else is logged as an error with the
    exception attached. Both are re-raised unchanged.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        tool_name = func.__name__
        start_time = time.time()

        workspace_info = {}
        if args and isinstance(args[0], RunContext):
            deps = getattr(args[0], 'deps', None)
            if isinstance(deps, Workspace):
                workspace_info = {
                    'workspace_workdir': str(deps.workdir),
                    'conflict_files': deps.conflict_files,
                }
        call_args = args[1:] if len(args) > 1 else []

        def elapsed_ms():
            return round((time.time() - start_time) * 1000, 2)

        logger.info(
            f"Tool '{tool_name}' invoked",
            tool_name=tool_name,
            args=call_args,
            kwargs=kwargs,
            **workspace_info,
        )

        try:
            result = func(*args, **kwargs)
        except ModelRetry as e:
            logger.warning(
                f"Tool '{tool_name}' raised ModelRetry",
                tool_name=tool_name,
                execution_time_ms=elapsed_ms(),
                retry_message=str(e),
                args=call_args,
                kwargs=kwargs,
                **workspace_info,
            )
            raise
        except Exception as e:
            logger.error(
                f"Tool '{tool_name}' raised unexpected exception",
                tool_name=tool_name,
                execution_time_ms=elapsed_ms(),
                exception_type=type(e).__name__,
                exception_message=str(e),
                args=call_args,
                kwargs=kwargs,
                _exc_info=e,
                **workspace_info,
            )
            raise

        text = str(result) if result else ""
        logger.info(
            f"Tool '{tool_name}' succeeded",
            tool_name=tool_name,
            execution_time_ms=elapsed_ms(),
            result_size=len(text),
            result_preview=text[:200],
        )
        logger.trace(
            f"Tool '{tool_name}' full result",
            tool_name=tool_name,
            result=text,
        )
        return result

    return wrapper


_raw_tools = [
    find_merge_conflicts,
    has_merge_conflicts,
    view_conflict_chunks,
    replace_conflict_chunk,
    resolve_conflict_chunk,
]

# For Agent(tools=chunk_tools, deps_type=Workspace)
chunk_tools = [_log_tool_execution(tool) for tool in _raw_tools]

__all__ = [
    "Workspace",
    "chunk_tools",
    "find_merge_conflicts",
    "has_merge_conflicts",
    "view_conflict_chunks",
    "replace_conflict_chunk",
    "resolve_conflict_chunk",
]
