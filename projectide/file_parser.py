"""
AI Response Parser

Turns the free-form text of an AI reply into generated file candidates.

A reply may carry any number of blocks of the form::

    projectName: my-app
    filename: src/main.ts
    version: 1.0.0
    ```ts
    ...
    ```
    end of file: src/main.ts

Blocks are matched left to right without overlap. Text after the
``end of file:`` marker is ignored up to the next ``projectName:`` marker.
The scan is not fence aware: a literal ``end of file:`` or ``projectName:``
line inside a code sample ends or splits the current block.
"""

import logging
import re
from typing import List, Optional

from .clock import Clock, now_millis
from .config import DEFAULT_PROJECT_NAME, DEFAULT_VERSION
from .models import CandidateFile

logger = logging.getLogger(__name__)

FENCE = "```"

BLOCK_PATTERN = re.compile(
    r"projectName:[ \t]*([^\n]*?)\s*\n"
    r"filename:[ \t]*([^\n]*?)\s*\n"
    r"version:[ \t]*([^\n]*?)\s*\n"
    r"(.*?)"
    r"\nend of file:.*?(?=\nprojectName:|\Z)",
    re.DOTALL,
)


def strip_fences(body: str) -> str:
    """
    Remove a leading fence line and a trailing fence marker.

    The language tag on the opening fence is discarded with its line.
    """
    content = body.strip()
    if content.startswith(FENCE):
        # a lone fence with no newline is left as is
        content = content[content.find("\n") + 1:]
    if content.endswith(FENCE):
        content = content[:content.rfind(FENCE)]
    return content.strip()


def _candidate_from_match(match: "re.Match") -> Optional[CandidateFile]:
    project_name = match.group(1).strip()
    file_name = match.group(2).strip()
    version = match.group(3).strip()
    content = strip_fences(match.group(4))

    if not (project_name and file_name and version and content):
        logger.debug(f"Dropped incomplete file block at offset {match.start()}")
        return None

    return CandidateFile(
        project_name=project_name,
        file_name=file_name,
        version=version,
        content=content,
    )


def parse_ai_response(response_text: str, clock: Clock = now_millis) -> List[CandidateFile]:
    """
    Extract generated file candidates from an AI reply.

    Args:
        response_text: Full reply text
        clock: Millisecond clock used to name the fallback file

    Returns:
        Candidates in the order they appear in the reply. When no block is
        accepted and the reply is not blank, a single fallback candidate
        holding the whole trimmed reply is returned instead.
    """
    files = []
    for match in BLOCK_PATTERN.finditer(response_text):
        candidate = _candidate_from_match(match)
        if candidate is not None:
            files.append(candidate)

    trimmed = response_text.strip()
    if not files and trimmed:
        file_name = f"response-{clock()}.txt"
        logger.info(f"No file blocks found in reply, storing it as {file_name}")
        files.append(CandidateFile(
            project_name=DEFAULT_PROJECT_NAME,
            file_name=file_name,
            version=DEFAULT_VERSION,
            content=trimmed,
        ))

    return files
