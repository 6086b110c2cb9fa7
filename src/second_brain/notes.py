"""Note service - note CRUD plus the AI helpers (summary, tags, chat)"""

import logging
from collections.abc import Callable

from second_brain.providers.base import LLMProvider, NoteStoreProvider, ProviderError
from second_brain.types import Note

logger = logging.getLogger(__name__)

CHAT_CONTEXT_NOTES = 20

SUMMARY_PROMPT = "Summarize this note in one sentence:\n\n{content}"

TAGS_PROMPT = (
    "Give 3 short tags for this note.\n"
    "Title: {title}\n"
    "Content: {content}\n"
    "Return comma-separated tags only, no numbering."
)


def parse_tags(text: str) -> list[str]:
    """Split a comma-separated LLM answer into trimmed, non-empty tags"""
    return [tag.strip() for tag in text.split(",") if tag.strip()]


def merge_tags(existing: list[str], new: list[str]) -> list[str]:
    """Union keeping first occurrence order"""
    return list(dict.fromkeys([*existing, *new]))


def build_chat_prompt(messages: list[dict], knowledge: list[Note]) -> str:
    """Flatten a conversation and the knowledge context into one prompt"""
    context = "\n\n".join(f"### {note.title}\n{note.content}" for note in knowledge)
    if context:
        system = f"You are a helpful assistant. Use the following knowledge to help answer questions:\n\n{context}"
    else:
        system = "You are a helpful assistant."

    turns = []
    for message in messages:
        speaker = "User" if message.get("role", "user") == "user" else "Assistant"
        turns.append(f"{speaker}: {message.get('content', '')}")

    return f"{system}\n\n" + "\n\n".join(turns) + "\n\nAssistant:"


class NoteService:
    """Note operations on top of a note store and an LLM provider resolver.

    `get_llm(name)` returns the provider for "gemini", "ollama" or None/"auto"
    (the configured default). AI failures during note creation are logged and
    skipped: a note is always saved.
    """

    def __init__(self, note_store: NoteStoreProvider, get_llm: Callable[[str | None], LLMProvider]):
        self.note_store = note_store
        self.get_llm = get_llm

    def create_note(
        self,
        title: str,
        content: str,
        type: str | None = None,
        tags: list[str] | None = None
    ) -> Note:
        if not title or not content:
            raise ValueError("Title and content are required")

        summary = None
        final_tags = list(tags or [])

        try:
            summary = self.summarize(content)
        except ProviderError as e:
            logger.warning(f"AI summary skipped: {e}")

        if not final_tags:
            try:
                final_tags = self.generate_tags(title, content)
            except ProviderError as e:
                logger.warning(f"AI tags skipped: {e}")

        note = self.note_store.create(
            title=title,
            content=content,
            type=type or "note",
            tags=final_tags,
            summary=summary,
        )
        logger.info(f"Created note {note.id} with {len(note.tags)} tags")
        return note

    def get_note(self, id: str) -> Note | None:
        return self.note_store.get(id)

    def list_notes(self, limit: int | None = None) -> list[Note]:
        return self.note_store.list(limit=limit)

    def update_note(
        self,
        id: str,
        title: str | None = None,
        content: str | None = None,
        type: str | None = None,
        tags: list[str] | None = None,
        summary: str | None = None
    ) -> Note | None:
        # An empty tag list is an update (clears the tags)
        if all(value is None for value in (title, content, type, tags, summary)):
            raise ValueError("Nothing to update")
        return self.note_store.update(
            id, title=title, content=content, type=type, tags=tags, summary=summary
        )

    def delete_note(self, id: str) -> bool:
        return self.note_store.delete(id)

    def summarize(self, content: str, note_id: str | None = None, provider: str | None = None) -> str:
        """One-sentence summary, stored on the note when note_id is given

        Raises:
            ValueError: If content is empty
            ProviderError: If no provider could summarize
        """
        if not content:
            raise ValueError("Content required")

        summary = self.get_llm(provider).generate(SUMMARY_PROMPT.format(content=content)).strip()
        if note_id:
            self.note_store.update(note_id, summary=summary)
        return summary

    def generate_tags(
        self,
        title: str | None,
        content: str,
        note_id: str | None = None,
        provider: str | None = None
    ) -> list[str]:
        """Ask the LLM for tags; merged into the note's tags when note_id is given

        Raises:
            ValueError: If content is empty
            ProviderError: If no provider could answer
        """
        if not content:
            raise ValueError("Content required")

        prompt = TAGS_PROMPT.format(title=title or "Untitled", content=content)
        tags = parse_tags(self.get_llm(provider).generate(prompt))

        if note_id:
            note = self.note_store.get(note_id)
            if note is not None:
                self.note_store.update(note_id, tags=merge_tags(note.tags, tags))
        return tags

    def chat(self, messages: list[dict], provider: str | None = None) -> str:
        """Answer the last message using the newest notes as context"""
        if not messages:
            raise ValueError("Messages required")

        knowledge = self.note_store.list(limit=CHAT_CONTEXT_NOTES)
        prompt = build_chat_prompt(messages, knowledge)
        return self.get_llm(provider).generate(prompt).strip()

    def search(self, query: str, limit: int = 5) -> list[Note]:
        if not query:
            raise ValueError('Query parameter "q" required')
        return self.note_store.search(query, limit=limit)
