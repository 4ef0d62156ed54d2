"""
LLM module - Completion endpoint integration.

This module provides:
- client.py : CompletionClient for the Groq chat-completion API
- prompts/  : Persona prompt and PromptAssembler
"""
from hith.llm.client import CompletionClient, DEFAULT_REPLY
from hith.llm.prompts import PromptAssembler

__all__ = ["CompletionClient", "DEFAULT_REPLY", "PromptAssembler"]
