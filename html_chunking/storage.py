"""
Chunk result storage.

Results are filed per source and per chunking mode, and the file name
carries the word budgets, so runs with different settings sit side by side:

    {data_dir}/{source_id}/{mode}/{timestamp}_t{target}-m{max}-n{min}-o{overlap}.json

Timestamps sort lexicographically, so the newest run is the last file name.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from .models import ChunkingConfig, ChunkingResult, ChunkMode

logger = logging.getLogger(__name__)


def config_key(config: ChunkingConfig) -> str:
    """Short, file-name safe summary of a ChunkingConfig."""
    return (
        f"t{config.target_words}-m{config.max_words}"
        f"-n{config.min_words}-o{config.overlap_sentences}"
    )


@dataclass
class ChunkingPaths:
    source_id: str
    mode: ChunkMode
    chunk_dir: Path
    chunk_file: Path


class ChunkingStorage:
    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def build_paths(
        self,
        source_id: str,
        mode: Union[ChunkMode, str],
        config: ChunkingConfig,
    ) -> ChunkingPaths:
        mode = ChunkMode(mode)
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
        chunk_dir = self.data_dir / source_id / mode.value
        chunk_dir.mkdir(parents=True, exist_ok=True)
        chunk_file = chunk_dir / f"{timestamp}_{config_key(config)}.json"
        return ChunkingPaths(
            source_id=source_id,
            mode=mode,
            chunk_dir=chunk_dir,
            chunk_file=chunk_file,
        )

    def save(self, result: ChunkingResult) -> ChunkingPaths:
        paths = self.build_paths(result.source_id, result.mode, result.config)
        result.save(str(paths.chunk_file))
        logger.debug("Saved %d chunks to %s", result.total_chunks, paths.chunk_file)
        return paths

    def list_results(
        self,
        source_id: str,
        mode: Optional[Union[ChunkMode, str]] = None,
        config: Optional[ChunkingConfig] = None,
    ) -> list[Path]:
        """Saved result files for a source, oldest first."""
        source_dir = self.data_dir / source_id
        if not source_dir.is_dir():
            return []

        pattern = f"*_{config_key(config)}.json" if config else "*.json"
        if mode is None:
            files = source_dir.glob(f"*/{pattern}")
        else:
            files = (source_dir / ChunkMode(mode).value).glob(pattern)
        return sorted(files, key=lambda p: p.name)

    def load_latest(
        self,
        source_id: str,
        mode: Optional[Union[ChunkMode, str]] = None,
        config: Optional[ChunkingConfig] = None,
    ) -> Optional[ChunkingResult]:
        """Load the most recent saved result, or None if nothing matches."""
        files = self.list_results(source_id, mode, config)
        if not files:
            return None
        return ChunkingResult.load(str(files[-1]))
