"""Service exports."""

from .candidate_editor import (
    add_skill,
    move_experience,
    move_section,
    move_skill,
    remove_skill,
    set_rating,
    update_education,
    update_experience,
    update_fields,
)
from .cv_renderer import LetterHead, render_candidate
from .llm_client import LLMClient, OpenAIChatClient, build_llm_client
from .record_store import RecordStore

__all__ = [
    "LLMClient",
    "OpenAIChatClient",
    "build_llm_client",
    "RecordStore",
    "LetterHead",
    "render_candidate",
    "add_skill",
    "remove_skill",
    "move_skill",
    "move_section",
    "move_experience",
    "set_rating",
    "update_fields",
    "update_experience",
    "update_education",
]
