"""
GenerationStats - Outcome counters for one cache warm-up run.
"""

import time
from dataclasses import dataclass, field
from typing import List


@dataclass
class GenerationStats:
    """
    What happened to each queued image during a warm-up.

    Every queued image ends up in exactly one bucket: a fresh entry was
    already in the cache, a thumbnail was generated and stored, a dry run
    planned one, or generation failed.

    Attributes:
        queued: Images in the priority queue
        cache_hits: Fresh entries found without decoding
        generated: Thumbnails decoded, encoded and stored
        planned: Thumbnails a dry run would have generated
        payload_chars: Base64 characters written by generation
        error_details: One message per failed image
        started: Monotonic clock reading at the start of the run
    """
    queued: int = 0
    cache_hits: int = 0
    generated: int = 0
    planned: int = 0
    payload_chars: int = 0
    error_details: List[str] = field(default_factory=list)
    started: float = field(default_factory=time.monotonic)

    def record_generated(self, thumbnail: str) -> None:
        self.generated += 1
        self.payload_chars += len(thumbnail)

    def record_failure(self, message: str) -> None:
        self.error_details.append(message)

    @property
    def failed(self) -> int:
        return len(self.error_details)

    @property
    def handled(self) -> int:
        """Images that reached a bucket so far."""
        return self.cache_hits + self.generated + self.planned + self.failed

    @property
    def remaining(self) -> int:
        return self.queued - self.handled

    @property
    def hit_ratio(self) -> float:
        """Percentage of handled images that were already cached."""
        if self.handled == 0:
            return 0.0
        return self.cache_hits / self.handled * 100

    @property
    def elapsed_seconds(self) -> float:
        return time.monotonic() - self.started

    @property
    def generated_per_minute(self) -> float:
        elapsed = self.elapsed_seconds
        if elapsed <= 0:
            return 0.0
        return self.generated / elapsed * 60
