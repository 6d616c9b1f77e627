from typing import Optional

from .chunker import DocumentChunker
from .config import ChunkingServiceConfig
from .models import ChunkingResult
from .storage import ChunkingStorage


class ChunkingService:
    def __init__(self, config: ChunkingServiceConfig | None = None):
        self.config = config or ChunkingServiceConfig()
        self.chunker = DocumentChunker(self.config.chunking)
        self.storage = ChunkingStorage(self.config.data_dir)

    def chunk_file(
        self,
        html_path: str,
        mime_type: Optional[str] = None,
        source_title: Optional[str] = None,
    ) -> ChunkingResult:
        return self.chunker.chunk_from_file(html_path, mime_type, source_title)

    def chunk_and_save(
        self,
        html_path: str,
        mime_type: Optional[str] = None,
        source_title: Optional[str] = None,
    ) -> tuple[ChunkingResult, str]:
        result = self.chunk_file(html_path, mime_type, source_title)
        paths = self.storage.save(result)
        return result, str(paths.chunk_file)

    def load_latest(
        self,
        source_id: str,
        mode: Optional[str] = None,
        same_config: bool = False,
    ) -> Optional[ChunkingResult]:
        """Most recent saved result for a source, optionally with this service's budgets."""
        config = self.config.chunking if same_config else None
        return self.storage.load_latest(source_id, mode, config)
