"""
Pydantic schemas for prompt submission and model listing.
"""
from typing import List, Optional

from pydantic import Field

from .auth import AuthenticatedIn


class PromptIn(AuthenticatedIn):
    """Prompt submission; images are base64 strings for vision models."""
    prompt: Optional[str] = None
    images: Optional[List[str]] = None
    model: Optional[str] = Field(default=None, max_length=50)  # Defaults to OLLAMA_MODEL
    stream: bool = False  # Ask Ollama for a chunked answer (joined before replying)

