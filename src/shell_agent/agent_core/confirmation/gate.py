"""Confirmation gates: the synchronous approve/deny checkpoint before risky tool calls.

A gate is any callable taking ``(tool_name, description, raw_arguments)`` and
returning a bool, or an awaitable bool. Raising signals that no answer could
be obtained; the agent loop records that as an error for the single call.
Blocking gates are called directly on the event loop thread, so a gate that
never returns stalls the run; timeouts are the caller's business. Ctrl-C at
the terminal prompt raises KeyboardInterrupt out of the run.
"""

import inspect
import signal
import sys
import threading
from contextlib import contextmanager
from typing import Awaitable, Callable, Iterator, Optional, TextIO, Union

from ..exceptions import ConfirmationError
from ..logger import get_logger

logger = get_logger(__name__)

ConfirmFunc = Callable[[str, str, str], Union[bool, Awaitable[bool]]]

_AFFIRMATIVE = frozenset({"y", "yes"})


class AutoApproveGate:
    """Approves every request."""

    def __call__(self, tool_name: str, description: str, raw_arguments: str) -> bool:
        logger.debug(f"Auto-approving tool '{tool_name}'.")
        return True


@contextmanager
def _default_sigint() -> Iterator[None]:
    """Make Ctrl-C raise KeyboardInterrupt while blocked on the terminal.

    asyncio.run replaces the SIGINT handler with one that only cancels the
    main task, which a blocking read never notices.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, signal.default_int_handler)
    try:
        yield
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


class TerminalConfirmationGate:
    """Asks on the terminal whether a tool may run."""

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output: Optional[TextIO] = None,
    ) -> None:
        """
        Args:
            input_func: Function used to read the answer.
            output: Stream the request is printed to. Defaults to stdout.
        """
        self._input = input_func
        self._output = output

    def __call__(self, tool_name: str, description: str, raw_arguments: str) -> bool:
        out = self._output or sys.stdout
        lines = ["", "Tool Execution Request", f"Tool: {tool_name}"]
        if description:
            lines.append(f"Description: {description}")
        if raw_arguments:
            lines.append(f"Arguments: {raw_arguments}")
        print("\n".join(lines), file=out)

        try:
            with _default_sigint():
                answer = self._input("Allow this tool to execute? [y/N] ")
        except EOFError as e:
            raise ConfirmationError("no answer received from terminal") from e

        return answer.strip().lower() in _AFFIRMATIVE


async def ask_confirmation(confirm: ConfirmFunc, tool_name: str, description: str, raw_arguments: str) -> bool:
    """Invoke a gate, awaiting it when it is a coroutine function or returns an awaitable.

    Args:
        confirm: The gate callable.
        tool_name: Name of the tool about to run.
        description: Human-readable description of the call.
        raw_arguments: Raw argument text supplied by the model.

    Returns:
        Whether the call was approved.
    """
    result = confirm(tool_name, description, raw_arguments)
    if inspect.isawaitable(result):
        result = await result
    return bool(result)
