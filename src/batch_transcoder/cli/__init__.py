"""CLI module for the batch transcoder."""

from .commands import ConvertCommands, UtilityCommands
from .main import BatchTranscoderCLI

__all__ = [
    "BatchTranscoderCLI",
    "ConvertCommands",
    "UtilityCommands",
]
