"""
Garden persistence.

The whole garden (every tree plus which one is being tended) is stored as a
single JSON document. Loading never fails: a missing file is an empty garden,
and a corrupt one is reported and replaced by an empty garden.
"""

from collections.abc import Callable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bonsai.config import BonsaiTree

DEFAULT_PATH = Path("zen-bonsai-storage.json")


class Garden(BaseModel):
    """All saved trees and the id of the active one."""

    model_config = ConfigDict(frozen=True)

    inventory: list[BonsaiTree] = Field(default_factory=list)
    active_tree_id: str | None = Field(default=None)

    def active_tree(self) -> BonsaiTree | None:
        for tree in self.inventory:
            if tree.id == self.active_tree_id:
                return tree
        return None

    def add(self, tree: BonsaiTree) -> "Garden":
        """Plant a tree and make it the active one."""
        return self.model_copy(
            update={"inventory": [*self.inventory, tree], "active_tree_id": tree.id}
        )

    def select(self, tree_id: str | None) -> "Garden":
        return self.model_copy(update={"active_tree_id": tree_id})

    def update_active(self, fn: Callable[[BonsaiTree], BonsaiTree]) -> "Garden":
        """Replace the active tree with fn(active). No-op without one."""
        if self.active_tree_id is None:
            return self
        inventory = [
            fn(tree) if tree.id == self.active_tree_id else tree
            for tree in self.inventory
        ]
        return self.model_copy(update={"inventory": inventory})


def save_garden(garden: Garden, path: str | Path = DEFAULT_PATH) -> None:
    Path(path).write_text(garden.model_dump_json(indent=2), encoding="utf-8")


def load_garden(path: str | Path = DEFAULT_PATH) -> Garden:
    """Load a garden, starting fresh if the file is missing or unreadable."""
    path = Path(path)
    if not path.exists():
        return Garden()
    try:
        return Garden.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        print(f"Failed to load inventory from {path}: {e}")
        return Garden()
