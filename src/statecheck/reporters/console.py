"""Console reporter for terminal output."""

from __future__ import annotations

import sys
from itertools import groupby
from typing import TextIO

from statecheck.core.result import CheckResult, MinimalFailure


class ConsoleReporter:
    """Formats check outcomes for terminal output.

    Features:
    - Numbered minimal sequence with the failing command highlighted
    - Shrink statistics (original length, replays, accepted steps)
    - Inconclusive SUT errors met while shrinking
    - Compact one-line summary for passing checks
    """

    # ANSI color codes
    RED = "\033[91m"
    YELLOW = "\033[93m"
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    # Box drawing characters
    BOX_TL = "┌"
    BOX_TR = "┐"
    BOX_BL = "└"
    BOX_BR = "┘"
    BOX_H = "─"
    BOX_V = "│"

    def __init__(self, file: TextIO = sys.stdout, color: bool = True) -> None:
        self.file = file
        self.color = color

    def _c(self, text: str, code: str) -> str:
        """Apply color if enabled."""
        if self.color:
            return f"{code}{text}{self.RESET}"
        return text

    def _collapse_sequence(self, commands: list[str]) -> str:
        """Collapse repeated consecutive commands.

        Example: ['Inc', 'Inc', 'Inc', 'Reset'] -> 'Inc ×3 → Reset'
        """
        collapsed = []
        for command, group in groupby(commands):
            count = len(list(group))
            collapsed.append(f"{command} ×{count}" if count > 1 else command)
        return " → ".join(collapsed)

    def report(self, minimal: MinimalFailure) -> None:
        """Output a minimal failing sequence to console."""
        failure = minimal.failure

        self._newline()
        status = self._c("FALSIFIED", self.RED + self.BOLD)
        self._line(f"  {self._c('✗', self.RED)} Stateful property: {status}")
        self._line(self._c("  " + "─" * 60, self.DIM))
        self._newline()

        summary_parts = [f"{len(minimal)} command(s)"]
        if minimal.original_length != len(minimal):
            summary_parts.append(f"shrunk from {minimal.original_length}")
        summary_parts.append(f"{minimal.replays} replays")
        if minimal.seed is not None:
            summary_parts.append(f"seed={minimal.seed}")
        self._line(f"  {self._c('Summary:', self.BOLD)} {' │ '.join(summary_parts)}")
        if minimal.budget_exhausted:
            self._line(self._c("  ⚠ Shrinking stopped at max_shrink_replays", self.YELLOW))
        self._newline()

        self._line(f"  {self._c('Sequence', self.BOLD)}")
        self._line(f"  {self.BOX_TL}{self.BOX_H * 58}{self.BOX_TR}")
        for i, description in enumerate(minimal.sequence):
            marker = self._c("✗", self.RED) if i == failure.position else " "
            number = self._c(f"{i + 1:>3}.", self.DIM)
            self._line(f"  {self.BOX_V} {marker} {number} {self._truncate(description, 50)}")
        self._line(f"  {self.BOX_BL}{self.BOX_H * 58}{self.BOX_BR}")
        self._newline()

        self._line(f"  {self._c('Failed at:', self.CYAN)} {failure.description} (position {failure.position})")
        self._line(f"  {self._c('Model state:', self.CYAN)} {self._truncate(repr(failure.state_before), 60)}")
        self._line(f"  {self._c(failure.error_type + ':', self.RED)} {self._truncate(failure.message, 200)}")

        if minimal.inconclusive:
            self._newline()
            self._line(f"  {self._c(f'Inconclusive SUT errors ({len(minimal.inconclusive)})', self.YELLOW)}")
            for error in minimal.inconclusive[:5]:
                code = self._c(f"[{error.error_code.value}]", self.DIM)
                self._line(f"    {code} {self._truncate(error.message, 70)}")
            if len(minimal.inconclusive) > 5:
                self._line(self._c(f"    ... and {len(minimal.inconclusive) - 5} more", self.DIM))

        self._newline()
        self._line(self._c("  " + "─" * 60, self.DIM))
        self._line(f"  {self._c('Replay:', self.BOLD)} {self._collapse_sequence(minimal.sequence)}")
        self._newline()

    def report_summary(self, result: CheckResult) -> None:
        """Output a one-line summary of a passing check."""
        parts = [
            f"{result.trials} trials",
            f"{result.commands_run} commands",
            f"longest {result.max_length_seen}",
            f"seed={result.seed}",
        ]
        self._line(f"  {self._c('✓', self.GREEN)} {self._c('PASSED', self.GREEN + self.BOLD)} {' │ '.join(parts)}")
        if result.sut_errors:
            self._line(self._c(f"  ⚠ {len(result.sut_errors)} SUT teardown error(s)", self.YELLOW))

    def _line(self, text: str) -> None:
        print(text, file=self.file)

    def _newline(self) -> None:
        print(file=self.file)

    def _truncate(self, text: str, max_chars: int = 200) -> str:
        """Truncate text to max_chars."""
        if len(text) <= max_chars:
            return text
        return text[:max_chars - 3] + "..."
