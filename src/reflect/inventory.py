"""Import of the legacy vim inventory file.

The inventory is a JSON object keyed by command title:

    {
      "coc definition": {
        "command": "none",
        "keyBinding": "gd",
        "action": "go to the definition of the selected text",
        "search": ["coc", "definition", "movement"]
      }
    }
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .models import VimCommand

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """Raised when the inventory file cannot be read or an entry is malformed."""

    pass


def load_vim_inventory(path: Path) -> list[VimCommand]:
    """Load vim commands from an inventory file.

    Args:
        path: Path to the JSON inventory.

    Returns:
        One VimCommand per key, in file order. The title comes from the key.

    Raises:
        InventoryError: If the file is unreadable, not a JSON object, or any
            entry fails validation.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise InventoryError(f"Cannot read inventory {path}: {e}")
    except json.JSONDecodeError as e:
        raise InventoryError(f"Inventory {path} is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise InventoryError(f"Inventory {path} must be a JSON object keyed by title")

    commands = []
    for title, entry in data.items():
        if not isinstance(entry, dict):
            raise InventoryError(f"Inventory entry {title!r} must be an object")
        try:
            commands.append(VimCommand.model_validate({**entry, "title": title}))
        except ValidationError as e:
            raise InventoryError(f"Invalid inventory entry {title!r}: {e}")

    logger.info("Loaded %d vim commands from %s", len(commands), path)
    return commands
