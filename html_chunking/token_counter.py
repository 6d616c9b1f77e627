"""
Token budget checks for chunks

Chunk sizes are governed by word counts; tokens are only measured to
confirm that chunks fit the embedding model's input limit. Counting uses
tiktoken. cl100k_base counts slightly higher than the WordPiece tokenizers
of small embedding models and so errs on the safe side.

Usage:
    from html_chunking.token_counter import count_tokens, count_tokens_batch

    n = count_tokens("This is an example sentence.")
    counts = count_tokens_batch([c.text for c in chunks], "o200k_base")
"""

from typing import Sequence

import tiktoken

DEFAULT_ENCODING = "cl100k_base"

# Input limit of bge-small class embedding models.
EMBEDDING_TOKEN_LIMIT = 512

# One encoder per encoding name, loaded on first use.
_encoders: dict[str, tiktoken.Encoding] = {}


def get_encoder(encoding_name: str = DEFAULT_ENCODING) -> tiktoken.Encoding:
    """Get or load the tiktoken encoder for an encoding name."""
    encoder = _encoders.get(encoding_name)
    if encoder is None:
        encoder = tiktoken.get_encoding(encoding_name)
        _encoders[encoding_name] = encoder
    return encoder


def count_tokens(text: str, encoding_name: str = DEFAULT_ENCODING) -> int:
    """Count the number of tokens in a text string."""
    if not text:
        return 0
    return len(get_encoder(encoding_name).encode(text))


def count_tokens_batch(
    texts: Sequence[str],
    encoding_name: str = DEFAULT_ENCODING,
) -> list[int]:
    """Count tokens for a list of texts, one count per input text."""
    encoder = get_encoder(encoding_name)
    return [len(encoder.encode(t)) if t else 0 for t in texts]

