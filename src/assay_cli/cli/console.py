"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.

Two streams are used:

* ``console`` — stderr: status lines, warnings, errors.
* ``stdout_console`` — stdout: command payloads only.
"""

from __future__ import annotations

import sys
from typing import Any

from assay_cli.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console(*, stderr: bool = True) -> Any:
	"""Create a Rich console instance targeting stderr (or stdout)."""
	console_class = _load_rich_console_class()
	return console_class(stderr=stderr)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def __init__(self, *, stderr: bool) -> None:
		self._stderr = stderr

	@property
	def _stream(self) -> Any:
		return sys.stderr if self._stderr else sys.stdout

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain print."""
		try:
			rich_console = get_rich_console(stderr=self._stderr)
		except EnvironmentError:
			print(*objects, file=self._stream)
			return
		rich_console.print(*objects)

	def message(self, label: str, text: str, style: str) -> None:
		"""Print ``label text`` with *label* styled; *text* is never parsed as markup."""
		try:
			from rich.text import Text

			rich_console = get_rich_console(stderr=self._stderr)
		except (ModuleNotFoundError, EnvironmentError):
			print(f"{label} {text}", file=self._stream)
			return
		rich_console.print(Text.assemble((label, style), " ", text))

	def raw(self, text: str) -> None:
		"""Write *text* verbatim (machine-readable payloads)."""
		print(text, file=self._stream)


console = _ConsoleProxy(stderr=True)
stdout_console = _ConsoleProxy(stderr=False)


def print_error(text: str) -> None:
	console.message("Error:", text, "bold red")


def print_warning(text: str) -> None:
	console.message("Warning:", text, "yellow")


def print_info(text: str) -> None:
	console.message("Info:", text, "blue")


def print_success(text: str) -> None:
	console.message("Success:", text, "bold green")
