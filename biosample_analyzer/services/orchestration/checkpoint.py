"""
Resume checkpoints for batch term resolution.

The last completed input index is stored in a JSON sidecar next to the output
file (``<output>.checkpoint``), written atomically via temp file + rename.
The leading index field of the output's last line is read as well and the
later of the two wins, so outputs written without a sidecar remain resumable
and a crash between writing a line and saving the sidecar never duplicates
output. A sidecar whose output file is gone is discarded.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from biosample_analyzer.config.constants import BACKUP_SUFFIX, CHECKPOINT_SUFFIX
from biosample_analyzer.utils.logger import get_logger

logger = get_logger(__name__)


class CheckpointError(Exception):
    """Raised when a checkpoint cannot be read or written."""

    pass


class Checkpoint(BaseModel):
    """Persisted resume state for one output file."""

    last_completed_index: int
    updated_at: datetime


class CheckpointStore:
    """
    Reads and writes the resume point for a batch output file.

    Usage:
        store = CheckpointStore(Path("results.tsv"), delimiter="\\t")
        start = store.load_start_index()
        ...
        store.save(last_index)
    """

    def __init__(self, output_path: Path, delimiter: str = "\t"):
        self.output_path = Path(output_path)
        self.delimiter = delimiter
        self.path = self.output_path.with_name(self.output_path.name + CHECKPOINT_SUFFIX)

    def load_start_index(self) -> int:
        """
        Index of the first record still to be processed.

        Without an output file there is nothing to resume: a leftover sidecar
        is dropped and the run starts at 0. Otherwise the later of the
        sidecar and the output's last line wins, so records already written
        are never written again.

        Returns:
            max(sidecar index, last output line index) + 1, or 0

        Raises:
            CheckpointError: If the sidecar or last output line is malformed
        """
        if not self.output_path.exists():
            if self.path.exists():
                logger.warning(
                    f"Ignoring checkpoint {self.path}: output {self.output_path} is missing"
                )
                self.clear()
            return 0

        candidates = []
        checkpoint = self.load()
        if checkpoint is not None:
            candidates.append(checkpoint.last_completed_index)
        last_index = self._last_output_index()
        if last_index is not None:
            candidates.append(last_index)

        if not candidates:
            return 0
        return max(candidates) + 1

    def load(self) -> Optional[Checkpoint]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                return Checkpoint(**json.load(f))
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            raise CheckpointError(f"Corrupt checkpoint file {self.path}: {e}") from e

    def save(self, last_completed_index: int) -> None:
        """
        Atomically record ``last_completed_index`` as done.

        Raises:
            CheckpointError: If the write fails
        """
        checkpoint = Checkpoint(
            last_completed_index=last_completed_index,
            updated_at=datetime.now(),
        )
        temp_file = self.path.with_name(self.path.name + ".tmp")

        try:
            with open(temp_file, "w", encoding="utf-8") as f:
                f.write(checkpoint.model_dump_json())
            temp_file.replace(self.path)
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise CheckpointError(f"Failed to write checkpoint {self.path}: {e}") from e

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()

    def restart(self) -> Optional[Path]:
        """
        Move the existing output aside and drop the checkpoint.

        Returns:
            Path of the backup file, or None if there was no output
        """
        self.clear()
        if not self.output_path.exists():
            return None
        backup = self.output_path.with_name(self.output_path.name + BACKUP_SUFFIX)
        self.output_path.replace(backup)
        logger.info(f"Moved previous output {self.output_path} to {backup}")
        return backup

    def _last_output_index(self) -> Optional[int]:
        """Leading index field of the last non-blank output line."""
        if not self.output_path.exists():
            return None

        last_line = ""
        with open(self.output_path, encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    last_line = line
        if not last_line:
            return None

        field = last_line.split(self.delimiter, 1)[0].strip().strip('"')
        try:
            return int(field)
        except ValueError as e:
            raise CheckpointError(
                f"Cannot resume from {self.output_path}: last line does not start "
                f"with a numeric index ({field!r})"
            ) from e
