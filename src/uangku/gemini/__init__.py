"""Generation service gateway."""
from .gateway import ModelGateway, GeminiGateway

__all__ = ["ModelGateway", "GeminiGateway"]
