#!/usr/bin/env python3
"""
Seed owners and boxes from a JSON file into the configured store.

The file is either a list of boxes or an object with "owners" and "boxes"
lists. Box entries accept a few spellings (boxNumber / box_number / number)
so exports from the old web client load as-is. Positions are applied after
creation, so placed boxes get their "loaded"/"moved" activity like any other.

Usage:
    python scripts/seed_boxes.py --file boxes.json
"""
import argparse
import json
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from boxtracker.db import init_db
from boxtracker.repositories.base import InventoryRepository
from boxtracker.schemas.box_schema import BoxCreate, BoxPosition, BoxStatus
from boxtracker.schemas.owner_schema import OwnerCreate
from boxtracker.services import lifecycle
from boxtracker.utils.log_setup import configure_logging, get_logger

log = get_logger("seed")


def _normalize_box(entry: dict) -> dict:
    """Return a dict with keys: box_number, owner, room, contents, status, position"""
    number = entry.get("box_number", entry.get("boxNumber", entry.get("number")))
    try:
        number = int(number)
    except (TypeError, ValueError):
        number = None
    return {
        "box_number": number,
        "owner": (entry.get("owner") or "").strip(),
        "room": (entry.get("room") or "").strip(),
        "contents": entry.get("contents") or "",
        "status": entry.get("status"),
        "position": entry.get("position"),
    }


def load_entries(path: str):
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except ValueError as e:
            raise RuntimeError(f"Failed to parse JSON from {path}: {e}")

    if isinstance(data, list):
        return [], data
    if isinstance(data, dict):
        return data.get("owners") or [], data.get("boxes") or []
    return [], []


def seed_from_file(repo: InventoryRepository, path: str) -> dict:
    """Create every owner and box in `path`; returns counts."""
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    owners, boxes = load_entries(path)

    known = {o.name.lower() for o in repo.list_owners()}
    created_owners = 0
    for o in owners:
        name = (o.get("name") or "").strip()
        if not name or name.lower() in known:
            continue
        repo.create_owner(OwnerCreate(name=name, color=o.get("color") or "#888888"))
        known.add(name.lower())
        created_owners += 1

    created_boxes = 0
    for raw in boxes:
        entry = _normalize_box(raw)
        if entry["box_number"] is None:
            log.warning("skipping box entry without a usable box number: %r", raw)
            continue
        if not entry["owner"] or not entry["room"]:
            log.warning("skipping box #%s: owner and room are required", entry["box_number"])
            continue
        box = repo.create_box(
            BoxCreate(
                box_number=entry["box_number"],
                owner=entry["owner"],
                room=entry["room"],
                contents=entry["contents"],
                status=entry["status"],
            )
        )
        if entry["position"]:
            status = lifecycle.parse_status(entry["status"])
            repo.update_box_position(
                box.id,
                BoxPosition(**entry["position"]),
                status if status == BoxStatus.LOADED else None,
            )
        created_boxes += 1

    log.info("Seeded %d owners, %d boxes", created_owners, created_boxes)
    return {"owners": created_owners, "boxes": created_boxes}


if __name__ == "__main__":
    from boxtracker.api.deps import DATABASE, STORAGE_BACKEND, open_repo

    parser = argparse.ArgumentParser()
    parser.add_argument("--file", "-f", required=True, help="Path to a JSON list of boxes, or {owners, boxes}")
    args = parser.parse_args()
    configure_logging()
    if not os.path.exists(args.file):
        print("File not found:", args.file)
        sys.exit(1)
    if STORAGE_BACKEND != DATABASE:
        print("STORAGE_BACKEND is not 'database'; seeded data would be lost on exit")
        sys.exit(1)
    init_db()
    repo = open_repo()
    try:
        seed_from_file(repo, args.file)
    finally:
        repo.close()
