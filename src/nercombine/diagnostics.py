"""Scoped diagnostic output for verbose annotation runs.

Verbose dumps and load timings go to stderr through a rich console owned
by whoever constructs the annotator. Nothing here touches stdout or the
annotation results.
"""

import time
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from rich.console import Console


class DiagnosticSink:
    """Writes human-readable diagnostics to an error stream."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the sink.

        Args:
            console: Console to write to. Defaults to a stderr console.
        """
        self.console = console or Console(stderr=True, highlight=False)

    def message(self, text: str) -> None:
        self.console.print(text, markup=False)

    @contextmanager
    def timer(self, text: str) -> Iterator[None]:
        """Print `text`, run the block, then report elapsed time."""
        self.message(text)
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.message(f"done [{elapsed:.1f} sec].")

    def dump(self, label: str, items: Iterable[object]) -> None:
        """Print `label: [a, b, c]` with each item rendered by `str`."""
        self.message(f"{label}: [" + ", ".join(str(item) for item in items) + "]")
