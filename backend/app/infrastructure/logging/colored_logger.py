"""Colored workflow logger — ANSI-colored console logging for the record workflow.

Provides a WorkflowLogger with color-coded output per stage, making it
easy to follow a record from the form to storage and through enrichment
in the terminal.

Color scheme:
    🟢 Green   — Storage
    🟡 Yellow  — Editor (draft commits)
    🟣 Magenta — Enrichment (LLM insight)
    🔴 Red     — Errors
    ⚪ Gray    — Timing / Stats
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    MAGENTA = "\033[95m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"


# ── Workflow Stage Definitions ───────────────────────────────────────

class WorkflowStage:
    """Predefined workflow stages with colors and icons."""

    STORAGE = ("STORAGE", _Colors.GREEN, "💾")
    EDITOR = ("EDITOR", _Colors.YELLOW, "📝")
    ENRICHMENT = ("ENRICH", _Colors.MAGENTA, "🤖")
    WORKFLOW = ("WORKFLOW", _Colors.WHITE, "⚙️")
    ERROR = ("ERROR", _Colors.RED, "❌")
    COMPLETE = ("COMPLETE", _Colors.GREEN, "✅")


# ── WorkflowLogger ───────────────────────────────────────────────────

class WorkflowLogger:
    """Color-coded logger for record workflow steps.

    Usage:
        log = WorkflowLogger("EnrichmentService")
        log.step_start(WorkflowStage.ENRICHMENT, "Analyzing Carlos Mendes")
        log.detail("Photo attached")
        log.step_complete(WorkflowStage.ENRICHMENT, "Insight stored")
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)
        self._component = component_name

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """Log the start of a workflow step with its stage color."""
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += f" {_Colors.GRAY}({_format_details(kwargs)}){_Colors.RESET}"
        self._logger.info(formatted)

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """Log the successful completion of a workflow step."""
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += f" {_Colors.GRAY}({_format_details(kwargs)}){_Colors.RESET}"
        self._logger.info(formatted)

    def step_error(self, stage: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        """Log a workflow step error in red."""
        label, _, icon = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        """Log additional detail (gray/dimmed)."""
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        if kwargs:
            formatted += f" {_Colors.DIM}({_format_details(kwargs)}){_Colors.RESET}"
        self._logger.info(formatted)

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Context manager that logs start/end with elapsed time.

        Usage:
            with log.timed_step(WorkflowStage.ENRICHMENT, "Requesting insight"):
                text = await generator.generate_insight(record)
        """
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.2f}s", **kwargs)


def _format_details(details: dict[str, Any]) -> str:
    return " | ".join(f"{k}={v}" for k, v in details.items())
