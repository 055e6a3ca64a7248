"""
Interaction History

Log of prompt/response exchanges, newest first.
"""

from datetime import datetime, timezone
from typing import List, Optional

from .clock import Clock, now_millis
from .models import Interaction


class InteractionHistory:

    def __init__(self, clock: Clock = now_millis):
        self._clock = clock
        self._items: List[Interaction] = []

    def add(
        self,
        profile_name: str,
        prompt: str,
        response: str,
        attached_image_name: Optional[str] = None,
    ) -> Interaction:
        millis = self._clock()
        interaction = Interaction(
            id=str(millis),
            timestamp=datetime.fromtimestamp(millis / 1000, tz=timezone.utc).isoformat(),
            profile_name=profile_name,
            prompt=prompt,
            response=response,
            attached_image_name=attached_image_name,
        )
        self._items.insert(0, interaction)
        return interaction

    @property
    def items(self) -> List[Interaction]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)
