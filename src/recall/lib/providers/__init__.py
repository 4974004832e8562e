"""Embedding and chat providers."""

from recall.lib.providers.base import Completer, Embedder
from recall.lib.providers.factory import create_completer, create_embedder
from recall.lib.providers.sk_provider import SKCompleter, SKEmbedder

__all__ = [
    "Completer",
    "Embedder",
    "SKCompleter",
    "SKEmbedder",
    "create_completer",
    "create_embedder",
]
