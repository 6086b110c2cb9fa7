"""Request models for the knowledge and AI helper endpoints

Required text fields default to empty so that missing values reach the
service layer and come back as 400 {"error": ...} like every other
validation failure.
"""

from pydantic import BaseModel, Field


class NoteCreate(BaseModel):
    """Request model for creating a note"""
    title: str = Field("", description="Note title (required)")
    content: str = Field("", description="Note body (required)")
    type: str | None = Field(None, description="Kind of note, defaults to 'note'")
    tags: list[str] | None = Field(None, description="Tags; generated by the LLM when omitted")


class NoteUpdate(BaseModel):
    """Request model for updating a note (at least one field)"""
    title: str | None = None
    content: str | None = None
    type: str | None = None
    tags: list[str] | None = None
    summary: str | None = None


class SummarizeRequest(BaseModel):
    """Request model for /ai/summarize"""
    itemId: str | None = Field(None, description="Note to store the summary on")
    content: str = Field("", description="Text to summarize")


class AutoTagRequest(BaseModel):
    """Request model for /ai/auto-tag"""
    itemId: str | None = Field(None, description="Note whose tags the result is merged into")
    title: str | None = None
    content: str = Field("", description="Text to tag")


class ChatMessage(BaseModel):
    role: str = "user"
    content: str = ""


class ChatRequest(BaseModel):
    """Request model for /ai/chat"""
    messages: list[ChatMessage] | None = Field(None, description="Conversation, last message answered")
