"""Corpus output writing."""

import sys
from pathlib import Path
from typing import BinaryIO, Optional

from .config import OutputFormat
from .errors import SinkError


class CorpusWriter:
    """Writes generated samples to stdout, a single file, or a directory."""

    def __init__(self, output_path: Path, output_format: OutputFormat,
                 separator: bytes = b"\n", stream: Optional[BinaryIO] = None):
        self.output_path = output_path
        self.output_format = output_format
        self.separator = separator
        self.stream = stream
        self.generation_count = 0
        self._owns_stream = False

    def initialize(self) -> None:
        """Initialize output destination."""
        try:
            if self.output_format == OutputFormat.DIRECTORY:
                self.output_path.mkdir(parents=True, exist_ok=True)
            elif self.output_format == OutputFormat.SINGLE_FILE:
                self.output_path.parent.mkdir(parents=True, exist_ok=True)
                self.stream = open(self.output_path, 'wb')
                self._owns_stream = True
            elif self.stream is None:
                self.stream = sys.stdout.buffer
        except OSError as e:
            raise SinkError(f"Failed to open output {self.output_path}: {e}") from e

    def write(self, name: str, sample: bytes) -> None:
        """Write a single sample.

        In directory mode every sample gets its own ``<name>_<index>.bin``
        file; otherwise samples are separator-terminated in one stream.
        """
        try:
            if self.output_format == OutputFormat.DIRECTORY:
                file_path = self.output_path / f"{name}_{self.generation_count:06d}.bin"
                with open(file_path, 'wb') as f:
                    f.write(sample)
            else:
                self.stream.write(sample + self.separator)

            self.generation_count += 1
        except (OSError, ValueError) as e:
            raise SinkError(f"Failed to write sample {self.generation_count}: {e}") from e

    def finalize(self) -> int:
        """Finalize output and return count."""
        if self.stream is not None:
            if self._owns_stream:
                self.stream.close()
                self.stream = None
                self._owns_stream = False
            else:
                self.stream.flush()
        return self.generation_count
