"""JSON reporter for machine-readable output."""

from __future__ import annotations

import json
from typing import Any

from statecheck.core.result import CheckResult, MinimalFailure


class JSONReporter:
    """Formats check outcomes as JSON."""

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def report(self, minimal: MinimalFailure) -> str:
        """Generate a JSON report of a minimal failing sequence."""
        data = self._to_dict(minimal)
        return json.dumps(data, indent=self.indent, default=str)

    def report_summary(self, result: CheckResult) -> str:
        return json.dumps({"success": True, **result.summary()}, indent=self.indent, default=str)

    def _to_dict(self, minimal: MinimalFailure) -> dict[str, Any]:
        data = minimal.to_dict()
        return {
            "success": False,
            "summary": {
                "length": len(minimal),
                "original_length": data["original_length"],
                "replays": data["replays"],
                "accepted": data["accepted"],
                "budget_exhausted": data["budget_exhausted"],
                "seed": data["seed"],
                "size": data["size"],
            },
            "sequence": data["sequence"],
            "failure": data["failure"],
            "inconclusive": data["inconclusive"],
        }
