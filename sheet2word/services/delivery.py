from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Protocol

from ..models.export import ExportArtifact

"""Delivery of rendered documents.

A sink receives one named blob at a time. ``SequentialDelivery`` hands
artifacts to a sink in order and waits a fixed delay *between* two
deliveries (never after the last one) so that a consumer throttling rapid
sequential saves keeps up.
"""

__all__ = [
    "DeliverySink",
    "DirectorySink",
    "SequentialDelivery",
    "DEFAULT_DELAY_SECONDS",
]

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 0.3


class DeliverySink(Protocol):
    def deliver(self, file_name: str, data: bytes) -> None: ...


class DirectorySink:
    """Save each delivered blob as a file in ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def deliver(self, file_name: str, data: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / file_name
        target.write_bytes(data)
        logger.debug("saved %s (%d bytes)", target, len(data))


class SequentialDelivery:
    """Deliver artifacts one after the other with an inter-artifact delay."""

    def __init__(self, sink: DeliverySink, delay_seconds: float = DEFAULT_DELAY_SECONDS) -> None:
        self.sink = sink
        self.delay_seconds = delay_seconds
        self.delivered = 0

    def deliver(self, artifact: ExportArtifact) -> None:
        if self.delivered > 0 and self.delay_seconds > 0:
            time.sleep(self.delay_seconds)
        self.sink.deliver(artifact.file_name, artifact.data)
        self.delivered += 1
