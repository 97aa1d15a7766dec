"""Remote generation service clients."""

from pagegen.ai.providers.remote import GenerationTransport, RemoteGenerationClient

__all__ = ["GenerationTransport", "RemoteGenerationClient"]
