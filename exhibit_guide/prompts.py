"""Prompt construction for catalog content generation.

Pure functions only: an item, a content type and the visitor's optional
question go in, prompt strings (or a ready-to-send message list) come out.
"""

from __future__ import annotations

from collections.abc import Iterable

from exhibit_guide.models import CatalogItem, ContentType, ConversationMessage

CONVERSATION_SYSTEM_PROMPT = (
    "You are an expert conversational AI map guide. Use the GeneratedDescription "
    "field from the map object as your primary source of facts to answer the "
    "user's question, and be concise."
)

# Appended to the guide persona sentence.
_SYSTEM_INSTRUCTIONS: dict[ContentType, str] = {
    ContentType.DESCRIPTION: "Provide a detailed, engaging description that would captivate museum visitors.",
    ContentType.STORY: "Tell an interesting story or historical narrative about this object that would engage visitors.",
    ContentType.FACTS: "Share fascinating facts and technical details that would educate visitors.",
    ContentType.CONVERSATION: "Provide helpful information about this object.",
    ContentType.OTHER: "Provide helpful information about this object.",
}

# Closing line of the user prompt.
_USER_INSTRUCTIONS: dict[ContentType, str] = {
    ContentType.DESCRIPTION: "Generate an engaging description for museum visitors.",
    ContentType.STORY: "Tell an interesting story about this object.",
    ContentType.FACTS: "Share fascinating facts about this object.",
    ContentType.CONVERSATION: "Answer the user's question based on the provided information.",
    ContentType.OTHER: "Provide information about this object.",
}

HISTORY_ROLES = ("user", "assistant")


def build_system_prompt(item: CatalogItem, content_type: ContentType) -> str:
    if content_type is ContentType.CONVERSATION:
        return CONVERSATION_SYSTEM_PROMPT

    persona = (
        "You are an expert aerospace historian and museum guide. "
        f"You are helping visitors learn about {item.name}, a {item.type}"
    )
    if item.category:
        persona += f" in the {item.category} category"
    if item.era:
        persona += f" from the {item.era}"
    return f"{persona}. {_SYSTEM_INSTRUCTIONS[content_type]}"


def _item_block(item: CatalogItem) -> str:
    lines = [f"Object: {item.name}", f"Type: {item.type}"]
    if item.category:
        lines.append(f"Category: {item.category}")
    if item.era:
        lines.append(f"Era: {item.era}")
    if item.manufacturer:
        lines.append(f"Manufacturer: {item.manufacturer}")
    if item.description:
        lines.append(f"Current Description: {item.description}")
    return "\n".join(lines)


def build_user_prompt(
    item: CatalogItem,
    content_type: ContentType,
    specific_request: str | None = None,
) -> str:
    """Build the final user turn.

    A specific request against an item that already has a generated
    description is answered from that description alone; the structured
    item block is left out entirely.
    """
    if specific_request:
        if item.generated_description:
            return f"CONTEXT: {item.generated_description}\n\nUSER QUESTION: {specific_request}"
        return f"{_item_block(item)}\n\nSpecific request: {specific_request}"

    base = _item_block(item)
    if content_type is ContentType.CONVERSATION and item.generated_description:
        base += f"\n\nPrimary Source (GeneratedDescription): {item.generated_description}"
    return f"{base}\n\n{_USER_INSTRUCTIONS[content_type]}"


def filter_history(history: Iterable[ConversationMessage]) -> list[dict[str, str]]:
    """Keep user/assistant turns in their original order; drop everything else."""
    return [
        {"role": m.role, "content": m.content}
        for m in history
        if m.role in HISTORY_ROLES
    ]


def build_messages(
    item: CatalogItem,
    content_type: ContentType,
    specific_request: str | None = None,
    conversation_history: Iterable[ConversationMessage] | None = None,
) -> list[dict[str, str]]:
    """System prompt, conversation history (conversation only), final user turn."""
    messages = [{"role": "system", "content": build_system_prompt(item, content_type)}]
    if content_type is ContentType.CONVERSATION and conversation_history:
        messages.extend(filter_history(conversation_history))
    messages.append({
        "role": "user",
        "content": build_user_prompt(item, content_type, specific_request),
    })
    return messages
