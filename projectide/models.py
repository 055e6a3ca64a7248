"""
Project IDE API Models

Pydantic models for generated files, editor files and request/response validation.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Generated file models

class CandidateFile(BaseModel):
    """A file extracted from an AI reply, before the store assigns an id."""
    model_config = ConfigDict(frozen=True)

    project_name: str = Field(..., description="Project the file belongs to")
    file_name: str = Field(..., description="Path-like file name, e.g. 'src/a.ts'")
    version: str = Field(..., description="Version string, usually dotted numeric")
    content: str = Field(..., description="File body without fence markers")

    @property
    def key(self) -> tuple:
        """Composite key that decides uniqueness in the store."""
        return (self.project_name, self.file_name, self.version)


class GeneratedFile(CandidateFile):
    """A stored generated file."""
    id: str = Field(..., description="Display identity, not part of uniqueness")


# Editor file models

class EditorFile(BaseModel):
    """A file in the virtual project tree."""
    id: str = Field(..., description="Unique file id")
    path: str = Field(..., description="Path inside the project, e.g. 'src/App.tsx'")
    content: str = Field("", description="File contents")
    language: str = Field("plaintext", description="Editor language mode")


class CreateFileRequest(BaseModel):
    """Request to create a file in the project tree."""
    path: str = Field(..., description="Desired path; made unique if taken")
    content: str = Field("", description="Initial contents")


class UpdateFileRequest(BaseModel):
    """Request to replace a file's contents."""
    content: str = Field(..., description="Updated file contents")


class FileListResponse(BaseModel):
    """Project tree listing."""
    files: List[EditorFile] = Field(..., description="All project files")
    open_file_ids: List[str] = Field(..., description="Ids of files open in tabs")
    active_file_id: Optional[str] = Field(None, description="Id of the focused file")


# AI profile models

class AIProfile(BaseModel):
    """An AI persona used for a staging request."""
    name: str = Field(..., description="Profile name")
    archetype: str = Field(..., description="Short archetype label")
    persona: str = Field(..., description="One-line persona description")
    system_instruction: str = Field(..., description="System prompt sent to Gemini")
    task_specialization: str = Field(..., description="What the profile is for")
    tone: List[str] = Field(default_factory=list, description="Tone keywords")
    google_search_enabled: bool = Field(False, description="Enable the search tool")
    code_interpreter_enabled: bool = Field(False, description="Enable code execution")


# Credential models

class ApiKeyRequest(BaseModel):
    """Request to set the Gemini API key."""
    api_key: str = Field(..., description="Opaque Gemini API key")


class ApiKeyStatus(BaseModel):
    """Whether a Gemini API key is configured."""
    configured: bool = Field(..., description="True when a key is set")


# Staging models

class ImageAttachment(BaseModel):
    """An image sent alongside a prompt."""
    name: str = Field(..., description="Original file name")
    mime_type: str = Field(..., description="Image MIME type, e.g. 'image/png'")
    data: str = Field(..., description="Base64 payload or data URL")


class StagingContext(BaseModel):
    """Staging context text."""
    context: str = Field("", description="Context prepended to every prompt")


class SubmitRequest(BaseModel):
    """Request to send a prompt to Gemini."""
    prompt: str = Field(..., description="User prompt")
    profile: Optional[str] = Field(None, description="AI profile name; first profile if omitted")
    image: Optional[ImageAttachment] = Field(None, description="Optional image attachment")


class SubmitResponse(BaseModel):
    """Reply from Gemini plus the files stored from it."""
    reply: str = Field(..., description="Raw reply text")
    files: List[GeneratedFile] = Field(..., description="Files newly added to the store")


class SendToEditorRequest(BaseModel):
    """Request to turn a block of text into a new editor file."""
    content: str = Field(..., description="Text to place in the new file")


class GeneratedFileRef(BaseModel):
    """Reference to a stored generated file by composite key."""
    project_name: str = Field(..., description="Project name")
    file_name: str = Field(..., description="File name")
    version: str = Field(..., description="Version")


class GeneratedFilesResponse(BaseModel):
    """Generated files grouped by project and file, newest version first."""
    projects: Dict[str, Dict[str, List[GeneratedFile]]] = Field(
        ..., description="project -> file -> versions (descending)"
    )
    total: int = Field(..., description="Number of stored files")


# History models

class Interaction(BaseModel):
    """One prompt/response exchange."""
    id: str = Field(..., description="Interaction id")
    timestamp: str = Field(..., description="ISO-8601 timestamp")
    profile_name: str = Field(..., description="AI profile used")
    prompt: str = Field(..., description="Full prompt sent, including context")
    response: str = Field(..., description="Reply text or 'Error: ...'")
    attached_image_name: Optional[str] = Field(None, description="Name of attached image")


# Error response model

class ErrorResponse(BaseModel):
    """Error response."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
