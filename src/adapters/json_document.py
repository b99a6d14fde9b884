"""One versioned JSON document per file, holding a single list of records.

Writes go to a sibling temp file first and replace the target in one step, so
a crash mid-write leaves the previous document intact.
"""

import json
import logging
import os

logger = logging.getLogger("music_league.storage")

SCHEMA_VERSION = 1


def read_items(path: str, key: str) -> list[dict]:
    if not os.path.exists(path):
        return []
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    return list(payload.get(key, []))


def write_items(path: str, key: str, items: list[dict]) -> None:
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    temp_path = path + ".tmp"
    with open(temp_path, "w", encoding="utf-8") as f:
        json.dump({"version": SCHEMA_VERSION, key: items}, f, ensure_ascii=False, indent=2)
    os.replace(temp_path, path)
    logger.debug("Wrote %s %s to %s", len(items), key, path)
