"""
Run manifest: an append-only JSON Lines report with one record per post link.

Failed records keep the URL and error so those posts can be retried by hand.
The manifest is a report only; runs never read it back, and a manifest that
cannot be written never fails a post.
"""

import json
import os
import logging
import threading
import time
from dataclasses import dataclass, asdict
from typing import Optional

from ..models import LinkOutcome


DEFAULT_MANIFEST_NAME = "manifest.jsonl"


@dataclass
class ManifestRecord:
    url: str
    status: str  # completed|failed
    output_path: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    recorded_at: float = 0.0

    @classmethod
    def from_outcome(cls, outcome: LinkOutcome) -> "ManifestRecord":
        return cls(
            url=outcome.url,
            status='completed' if outcome.success else 'failed',
            output_path=outcome.output_path,
            error=outcome.error,
            error_type=outcome.error_type,
            recorded_at=time.time(),
        )


class Manifest:
    def __init__(self, output_dir: str, name: str = DEFAULT_MANIFEST_NAME):
        self.output_dir = output_dir
        self.path = os.path.join(self.output_dir, name)
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

    def append(self, rec: ManifestRecord) -> bool:
        """Append one record; returns False if the manifest could not be written."""
        line = json.dumps(asdict(rec), ensure_ascii=False) + "\n"
        with self._lock:
            try:
                os.makedirs(self.output_dir, exist_ok=True)
                with open(self.path, 'a', encoding='utf-8') as f:
                    f.write(line)
            except OSError as e:
                self.logger.warning(f"Could not write manifest record for {rec.url}: {e}")
                return False
        return True

    def record(self, outcome: LinkOutcome) -> bool:
        return self.append(ManifestRecord.from_outcome(outcome))
