#!/usr/bin/env python3
"""
Create the PocketBase collections used by the camp portal.

Collections are created superuser-only (no API rules): the portal API reads
and writes them through its service client. Existing collections are left
untouched.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Any

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from dotenv import load_dotenv
from pocketbase.client import ClientResponseError  # type: ignore[attr-defined]

from camp_portal.data.connection_manager import ConnectionConfig, ConnectionManager
from camp_portal.data.repositories.profile_repository import PROFILES_COLLECTION
from camp_portal.data.repositories.registration_repository import REGISTRATIONS_COLLECTION
from camp_portal.data.repositories.room_repository import ROOMS_COLLECTION
from camp_portal.logging_config import configure_logging, get_logger
from camp_portal.models import CamperGender, RoomGender, SessionPreference

logger = get_logger(__name__)


def _text(name: str, required: bool = True) -> dict[str, Any]:
    return {"name": name, "type": "text", "required": required}


def _select(name: str, values: list[str]) -> dict[str, Any]:
    return {"name": name, "type": "select", "values": values, "maxSelect": 1, "required": True}


def rooms_schema() -> dict[str, Any]:
    return {
        "name": ROOMS_COLLECTION,
        "type": "base",
        "fields": [
            _text("room_number"),
            _select("gender", [g.value for g in RoomGender]),
            {"name": "capacity", "type": "number", "required": True, "min": 1, "onlyInt": True},
        ],
        "indexes": [f"CREATE UNIQUE INDEX idx_room_number ON {ROOMS_COLLECTION} (room_number)"],
    }


def registrations_schema(rooms_collection_id: str) -> dict[str, Any]:
    return {
        "name": REGISTRATIONS_COLLECTION,
        "type": "base",
        "fields": [
            _text("camper_name"),
            {"name": "age", "type": "number", "required": True, "onlyInt": True},
            _select("gender", [g.value for g in CamperGender]),
            _text("parent_name"),
            {"name": "parent_email", "type": "email", "required": True},
            _text("parent_phone"),
            _text("emergency_contact"),
            _text("emergency_phone"),
            _text("medical_conditions", required=False),
            _text("dietary_restrictions", required=False),
            _select("session_preference", [s.value for s in SessionPreference]),
            {
                "name": "room_id",
                "type": "relation",
                "collectionId": rooms_collection_id,
                "maxSelect": 1,
                "cascadeDelete": False,
                "required": False,
            },
            {"name": "created", "type": "autodate", "onCreate": True, "onUpdate": False},
        ],
        "indexes": [f"CREATE INDEX idx_registration_room ON {REGISTRATIONS_COLLECTION} (room_id)"],
    }


def profiles_schema() -> dict[str, Any]:
    return {
        "name": PROFILES_COLLECTION,
        "type": "base",
        "fields": [
            {"name": "email", "type": "email", "required": True},
            _text("full_name"),
            {"name": "is_admin", "type": "bool"},
        ],
    }


def ensure_collection(pb: Any, schema: dict[str, Any], dry_run: bool) -> str | None:
    """Create a collection unless it exists. Returns its id (None in a dry run)."""
    name = schema["name"]
    try:
        existing = pb.collections.get_one(name)
        logger.info(f"Collection {name} already exists, leaving it unchanged")
        return str(existing.id)
    except ClientResponseError as e:
        if getattr(e, "status", 0) != 404:
            raise

    if dry_run:
        logger.info(f"[dry run] Would create collection {name}")
        return None

    created = pb.collections.create(schema)
    logger.info(f"Created collection {name}")
    return str(created.id)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create camp portal collections in PocketBase")
    parser.add_argument("--dry-run", action="store_true", help="Report what would be created")
    args = parser.parse_args()

    load_dotenv()
    configure_logging(source="setup")

    manager = ConnectionManager(ConnectionConfig.from_env())
    try:
        manager.authenticate()
        pb = manager.get_client()
        rooms_id = ensure_collection(pb, rooms_schema(), args.dry_run)
        ensure_collection(pb, registrations_schema(rooms_id or ROOMS_COLLECTION), args.dry_run)
        ensure_collection(pb, profiles_schema(), args.dry_run)
    except ClientResponseError as e:
        logger.error(f"Collection setup failed: {e} {getattr(e, 'data', '')}")
        sys.exit(1)


if __name__ == "__main__":
    main()
