"""
Staging Conversation

Builds prompts from the staging context, sends them to Gemini, records the
exchange and stores every file found in the reply.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .ai_client import AIClient
from .clock import Clock, now_millis
from .file_parser import parse_ai_response
from .generated_store import GeneratedFileStore
from .history import InteractionHistory
from .models import EditorFile, GeneratedFile, ImageAttachment
from .profiles import get_profile

logger = logging.getLogger(__name__)


@dataclass
class SubmitResult:
    reply: str
    files: List[GeneratedFile] = field(default_factory=list)


def build_prompt(context: str, prompt: str) -> str:
    return f"{context}\n\n---\n\nPROMPT:\n{prompt}"


def file_update_block(record: GeneratedFile) -> str:
    """Context block asking the model to revise a generated file."""
    language = record.file_name.rsplit(".", 1)[-1]
    return (
        "\n// --- START OF FILE TO UPDATE ---\n"
        f"projectName: {record.project_name}\n"
        f"filename: {record.file_name}\n"
        f"version: {record.version}\n"
        f"```{language}\n"
        f"{record.content}\n"
        "```\n"
        f"end of file: {record.file_name}\n"
        "// --- END OF FILE TO UPDATE ---\n"
        "\n"
        "// Instructions: Please update the file above as requested in the prompt. "
        "Remember to increment the version number.\n"
    )


class Conversation:
    """
    One staging session.

    At most one request is in flight; the reply is parsed and stored before
    the next submit is accepted.
    """

    def __init__(
        self,
        ai_client: AIClient,
        store: GeneratedFileStore,
        history: Optional[InteractionHistory] = None,
        clock: Clock = now_millis,
    ):
        self.ai_client = ai_client
        self.store = store
        self.history = history if history is not None else InteractionHistory(clock)
        self.clock = clock
        self.context = ""
        self._busy = asyncio.Lock()

    # Context management

    def attach_editor_file(self, file: EditorFile) -> str:
        self.context += (
            f"\n\n// --- START OF FILE: {file.path} ---\n"
            f"{file.content}\n"
            f"// --- END OF FILE: {file.path} ---"
        )
        return self.context

    def attach_upload(self, name: str, text: str) -> str:
        self.context += (
            f"\n\n// --- START OF UPLOADED FILE: {name} ---\n"
            f"{text}\n"
            f"// --- END OF UPLOADED FILE: {name} ---"
        )
        return self.context

    def stage_generated_file(self, record: GeneratedFile) -> str:
        """Prepend a generated file to the context for another revision."""
        self.context = f"{file_update_block(record)}\n\n{self.context}"
        return self.context

    def clear_context(self) -> None:
        self.context = ""

    # AI exchange

    @property
    def busy(self) -> bool:
        return self._busy.locked()

    async def submit(
        self,
        prompt: str,
        profile_name: Optional[str] = None,
        image: Optional[ImageAttachment] = None,
    ) -> SubmitResult:
        """
        Send a prompt and store the files in the reply.

        Raises:
            ValueError: If the prompt is blank or no API key is set
            KeyError: If the profile is unknown
            RuntimeError: If a request is already running or Gemini fails
        """
        if not prompt.strip():
            raise ValueError("Prompt must not be empty")
        if self.busy:
            raise RuntimeError("A request is already in progress")

        profile = get_profile(profile_name)

        async with self._busy:
            full_prompt = build_prompt(self.context, prompt)
            image_name = image.name if image else None

            try:
                reply = await self.ai_client.generate(full_prompt, profile, image)
            except (ValueError, RuntimeError) as e:
                self.history.add(profile.name, full_prompt, f"Error: {e}", image_name)
                raise

            self.history.add(profile.name, full_prompt, reply, image_name)

            candidates = parse_ai_response(reply, clock=self.clock)
            stored = self.store.insert_many(candidates)
            logger.info(
                f"{profile.name} reply: {len(candidates)} files parsed, {len(stored)} new"
            )
            return SubmitResult(reply=reply, files=stored)
