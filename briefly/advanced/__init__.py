"""
Briefly Advanced module - layout, styling and diagram agents with a notebook designer.
"""

from briefly.advanced.agents import DiagramAgent, LayoutAgent, StylingAgent
from briefly.advanced.designer import NoteDesigner
from briefly.advanced.engine import AGENT_PIPELINE, AdvancedNoteEngine, AdvancedNotesResult
from briefly.advanced.models import DiagramInstructions, LayoutData, StyledData

__all__ = [
    # Models
    "DiagramInstructions",
    "LayoutData",
    "StyledData",
    # Agents
    "DiagramAgent",
    "LayoutAgent",
    "StylingAgent",
    # Designer / engine
    "AGENT_PIPELINE",
    "AdvancedNoteEngine",
    "AdvancedNotesResult",
    "NoteDesigner",
]
