"""Gemini-backed agents: one capability per canvas action."""
from haven.agents.assistant import run_assistant
from haven.agents.capability import Capability, run_capability
from haven.agents.categorize import categorize_item
from haven.agents.learning import run_course, run_quiz
from haven.agents.vision import analyze_image_url

__all__ = [
    "Capability",
    "run_capability",
    "run_assistant",
    "categorize_item",
    "run_course",
    "run_quiz",
    "analyze_image_url",
]
