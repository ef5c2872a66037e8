"""Confirmation gates consulted before risky tool execution."""

from .gate import AutoApproveGate, ConfirmFunc, TerminalConfirmationGate, ask_confirmation

__all__ = ["AutoApproveGate", "ConfirmFunc", "TerminalConfirmationGate", "ask_confirmation"]
