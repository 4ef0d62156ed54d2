"""
Companion Prompts - Persona and message-list assembly for replies.

The persona is fixed; only the resolved user language is appended to it.
History is passed through untouched: choosing how many turns to send is
the caller's job (see HISTORY_LIMIT).
"""
from typing import Dict, Iterable, List

HITH_SYSTEM_PROMPT = """You are HITH: a gentle, encouraging companion for journaling, coaching and tiny steps.
Style: warm, concise, encouraging. Celebrate small wins. Never overwhelm the user.
Language: mirror the user's language (en, it, de). Use plain words.
Boundaries: no medical, financial or legal advice; suggest professional help when relevant.
Format: 1-3 short paragraphs OR a short checklist. End with one concrete next step."""


def get_companion_system_prompt(language: str) -> str:
    """
    Get the system prompt for a conversation.

    Args:
        language: Resolved two-letter user language

    Returns:
        Persona text followed by an explicit language statement
    """
    return f"{HITH_SYSTEM_PROMPT}\nUser language: {language}"


class PromptAssembler:
    """
    Builds the ordered message list sent to the completion endpoint.

    Order: one system entry, every history entry as received, then the
    new user text.
    """

    def assemble(
        self,
        language: str,
        history: Iterable[Dict[str, str]],
        new_user_text: str
    ) -> List[Dict[str, str]]:
        messages = [{"role": "system", "content": get_companion_system_prompt(language)}]
        messages.extend(
            {"role": entry["role"], "content": entry["content"]} for entry in history
        )
        messages.append({"role": "user", "content": new_user_text})
        return messages
