from __future__ import annotations
import json
from typing import Any, Dict

from rich.console import Console

err_console = Console(stderr=True, highlight=False, soft_wrap=True, emoji=False)

_debug_enabled = False


def set_debug(enabled: bool) -> None:
	global _debug_enabled
	_debug_enabled = bool(enabled)


def is_debug() -> bool:
	return _debug_enabled


def debug(message: str) -> None:
	if not _debug_enabled:
		return
	err_console.print(json.dumps({"debug": message}, ensure_ascii=False), markup=False)


def report_error(payload: Dict[str, Any]) -> None:
	# Structured errors stay machine-readable on stderr
	err_console.print(json.dumps(payload, ensure_ascii=False), markup=False)
