"""Size comparison between generic JSON and TOON."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SizeComparison(BaseModel):
    """Estimated size of a value as generic JSON versus TOON.

    ``savings_percent`` is negative when TOON is larger.
    """

    model_config = ConfigDict(frozen=True)

    generic_text: str
    generic_size: int
    toon_text: str
    toon_size: int
    savings_percent: float
