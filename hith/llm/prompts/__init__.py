"""
Prompts module - LLM prompt templates.

Prompts are stored as separate Python files for:
- Version control of prompt changes
- Clear documentation of prompt purpose
"""
from hith.llm.prompts.companion_prompts import (
    HITH_SYSTEM_PROMPT,
    PromptAssembler,
    get_companion_system_prompt,
)

__all__ = [
    "HITH_SYSTEM_PROMPT",
    "PromptAssembler",
    "get_companion_system_prompt",
]
