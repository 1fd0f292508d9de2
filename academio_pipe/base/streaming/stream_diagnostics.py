"""Per-stream record of payload lines that could not be used.

Malformed lines never abort a stream; this record keeps that data loss
observable to callers instead of only to the log.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ...config.defaults import MALFORMED_SAMPLE_LIMIT


@dataclass
class StreamDiagnostics:
    """Counters plus a bounded sample of offending payload lines."""

    malformed_count: int = 0
    unrecognized_count: int = 0
    malformed_samples: List[str] = field(default_factory=list)
    discarded_tail: str = ""

    def record_malformed(self, line: str) -> None:
        self.malformed_count += 1
        if len(self.malformed_samples) < MALFORMED_SAMPLE_LIMIT:
            self.malformed_samples.append(line)

    def record_unrecognized(self) -> None:
        self.unrecognized_count += 1

    @property
    def clean(self) -> bool:
        return not (self.malformed_count or self.unrecognized_count or self.discarded_tail)


__all__ = ["StreamDiagnostics"]
