"""
Caller-side terrain state.

A TerrainSession holds the one live terrain and the one current lore text.
Generation stays a pure function; this object owns the policy around it:

- width, height or density changes regenerate and replace the terrain,
  and so does a seed given on its own
- zoom changes only affect rendering
- a new terrain clears the lore slot
- a lore response that arrives after its terrain was replaced is dropped
"""

from dataclasses import dataclass, replace
from typing import Optional

import structlog

from .terrain_generator import GenerationResult, TerrainConfig, generate_terrain
from ..utils.random import make_prng

logger = structlog.get_logger()


@dataclass(frozen=True)
class LoreEntry:
    """Lore text tagged with the terrain it describes."""

    text: str
    generation: int
    width: int
    height: int


class TerrainSession:
    """Most-recent-wins holder for a terrain, its zoom and its lore."""

    def __init__(self, config: Optional[TerrainConfig] = None, scale: int = 1):
        self.config = config or TerrainConfig()
        self.scale = scale
        self.result: Optional[GenerationResult] = None
        self.generation = 0
        self.lore: Optional[LoreEntry] = None

    def generate(
        self,
        config: Optional[TerrainConfig] = None,
        seed: Optional[str] = None,
    ) -> GenerationResult:
        """Generate a fresh terrain, superseding the previous one."""
        if config is not None:
            self.config = config

        self.result = generate_terrain(self.config, make_prng(seed))
        self.generation += 1
        self.lore = None

        logger.info(
            "Session terrain replaced",
            generation=self.generation,
            width=self.result.width,
            height=self.result.height,
            density=self.config.density,
            seed=self.result.seed,
        )
        return self.result

    def update(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        density: Optional[int] = None,
        scale: Optional[int] = None,
        seed: Optional[str] = None,
    ) -> bool:
        """
        Apply a partial configuration change.

        Width, height or density changes regenerate, and so does a seed given
        on its own (a reroll). Scale alone never does.

        Returns:
            True if the terrain was regenerated
        """
        if scale is not None:
            self.scale = scale

        changes = {
            key: value
            for key, value in (("width", width), ("height", height), ("density", density))
            if value is not None and getattr(self.config, key) != value
        }
        if not changes and seed is None and self.result is not None:
            return False

        self.generate(replace(self.config, **changes), seed=seed)
        return True

    def begin_lore_request(self) -> Optional[LoreEntry]:
        """
        Ticket for a lore request against the current terrain.

        The ticket carries no text yet; pass it back to ``complete_lore``.
        """
        if self.result is None:
            return None
        return LoreEntry(
            text="",
            generation=self.generation,
            width=self.result.width,
            height=self.result.height,
        )

    def is_current(self, ticket: LoreEntry) -> bool:
        return (
            self.result is not None
            and ticket.generation == self.generation
            and ticket.width == self.result.width
            and ticket.height == self.result.height
        )

    def complete_lore(self, ticket: LoreEntry, text: str) -> bool:
        """
        Store lore for the ticket's terrain unless that terrain was replaced.

        Returns:
            True if stored, False if the response was stale
        """
        if not self.is_current(ticket):
            logger.info(
                "Discarding stale lore",
                requested_generation=ticket.generation,
                current_generation=self.generation,
            )
            return False

        self.lore = replace(ticket, text=text)
        return True

    @property
    def lore_text(self) -> str:
        return self.lore.text if self.lore else ""
