"""Application layer - use cases, DTOs and configuration."""

from .commands import GenerateBoxCommand
from .dtos import BoxOutput, BoxRequest, OverlayInput

__all__ = [
    "BoxOutput",
    "BoxRequest",
    "GenerateBoxCommand",
    "OverlayInput",
]
