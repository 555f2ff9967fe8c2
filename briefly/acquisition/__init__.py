"""
Briefly Acquisition module - turns uploads and payloads into plain text.
"""

from briefly.acquisition.acquirer import (
    SUPPORTED_EXTENSIONS,
    AcquiredContent,
    acquire_payload,
    acquire_upload,
)

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "AcquiredContent",
    "acquire_payload",
    "acquire_upload",
]
