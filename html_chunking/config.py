from dataclasses import dataclass, field
import os

from .models import ChunkingConfig


@dataclass
class ChunkingServiceConfig:
    data_dir: str = "data/chunking"
    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)

    @classmethod
    def from_env(cls) -> "ChunkingServiceConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            return int(value) if value else default

        defaults = ChunkingConfig()
        return cls(
            data_dir=os.environ.get("CHUNKING_DATA_DIR", cls.data_dir),
            chunking=ChunkingConfig(
                target_words=_int("CHUNKING_TARGET_WORDS", defaults.target_words),
                max_words=_int("CHUNKING_MAX_WORDS", defaults.max_words),
                min_words=_int("CHUNKING_MIN_WORDS", defaults.min_words),
                overlap_sentences=_int("CHUNKING_OVERLAP_SENTENCES", defaults.overlap_sentences),
            ),
        )
