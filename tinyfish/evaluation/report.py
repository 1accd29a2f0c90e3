"""One evaluation run of a tinyfish configuration, as JSON and plain text.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .avalanche import MixAvalancheResult, SACResult
from .roundtrip import RoundtripResult
from .sbox_analysis import SBoxAnalysisResult

REPORT_JSON = "evaluation.json"
SUMMARY_TXT = "summary.txt"


@dataclass
class EvaluationReport:
    substitution: bool = False
    timestamp: str = ""
    roundtrip: Optional[RoundtripResult] = None
    sac: List[SACResult] = field(default_factory=list)
    mix: Optional[MixAvalancheResult] = None
    sbox: Optional[SBoxAnalysisResult] = None

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    @property
    def label(self) -> str:
        return "tinyfish+sbox" if self.substitution else "tinyfish"

    def problems(self) -> List[str]:
        """Checks that did not pass, in report order."""
        found = []
        if self.roundtrip and not self.roundtrip.is_perfect:
            found.append(f"roundtrip: {self.roundtrip.failed} failing vectors")
        found.extend(f"SAC ({s.input_type})" for s in self.sac if not s.passes_sac)
        if self.mix and not self.mix.passes:
            found.append("mixing function avalanche")
        if self.sbox and not self.sbox.bijective:
            found.append(f"{self.sbox.table_id} is not a permutation")
        return found

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "substitution": self.substitution,
            "timestamp": self.timestamp,
            "roundtrip": self.roundtrip.to_dict() if self.roundtrip else None,
            "sac": [s.to_dict() for s in self.sac],
            "mix": self.mix.to_dict() if self.mix else None,
            "sbox": self.sbox.to_dict() if self.sbox else None,
            "problems": self.problems(),
        }

    def to_summary(self) -> str:
        lines = [f"{self.label} evaluation - {self.timestamp}", "=" * 50]
        if self.roundtrip:
            lines.append(self.roundtrip.summary())
        lines.extend(s.summary() for s in self.sac)
        if self.mix:
            m = self.mix
            lines.append(
                f"G: {m.changed}/{m.samples} one-bit flips changed the output "
                f"(mean {m.mean_flipped_bits:.2f} bits)"
            )
        if self.sbox:
            lines.append(self.sbox.summary())
        problems = self.problems()
        lines.append("")
        lines.append("Problems: " + ("; ".join(problems) if problems else "none"))
        return "\n".join(lines)

    def save(self, runs_root: Union[str, Path]) -> Path:
        """Write the JSON report and text summary into a new timestamped run directory."""
        stamp = re.sub(r"[^0-9T]", "-", self.timestamp[:19])
        safe = re.sub(r"[^A-Za-z0-9_-]", "_", self.label)
        run_dir = Path(runs_root) / f"{stamp}_{safe}"
        run_dir.mkdir(parents=True, exist_ok=True)
        (run_dir / REPORT_JSON).write_text(
            json.dumps(self.to_dict(), indent=2, sort_keys=True), encoding="utf-8"
        )
        (run_dir / SUMMARY_TXT).write_text(self.to_summary(), encoding="utf-8")
        return run_dir
