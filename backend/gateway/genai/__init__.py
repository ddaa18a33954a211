"""Generation endpoints: text, file-backed and chat generation, plus health
and file-type discovery."""
from .controller import GenerationController
from .router import router

__all__ = ["GenerationController", "router"]
