#!/usr/bin/env python3
"""Show room occupancy and flag rooms that ended up over capacity.

Room assignment is best effort: two registrations submitted at the same time
can both take the last bed of a room. Run this to find rooms that need to be
fixed by hand.
"""

from __future__ import annotations

import argparse
import json
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

from camp_portal.data.data_access_context import DataAccessContext
from camp_portal.errors import DataAccessError
from camp_portal.logging_config import configure_logging, get_logger
from camp_portal.models import RoomOccupancy
from camp_portal.services import RoomService

logger = get_logger(__name__)


def format_table(rooms: list[RoomOccupancy]) -> str:
    lines = [f"  {'ROOM':10} {'GENDER':8} {'OCCUPANCY':>10}"]
    for item in rooms:
        flag = "  OVERBOOKED" if item.is_overbooked else ""
        occupancy = f"{item.occupancy}/{item.room.capacity}"
        lines.append(f"  {item.room.room_number:10} {item.room.gender.value:8} {occupancy:>10}{flag}")
    return "\n".join(lines)


def main() -> int:
    parser = argparse.ArgumentParser(description="Room occupancy report")
    parser.add_argument("--overbooked-only", action="store_true", help="Only list rooms over capacity")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    args = parser.parse_args()

    load_dotenv()
    configure_logging(source="report")

    try:
        with DataAccessContext() as ctx:
            service = RoomService(ctx.rooms, ctx.registrations)
            rooms = service.overbooked_rooms() if args.overbooked_only else service.list_rooms_with_occupancy()
    except DataAccessError as e:
        logger.error(f"Could not load rooms: {e}")
        return 1

    if args.json:
        print(json.dumps([{**r.room.model_dump(mode="json"), "occupancy": r.occupancy} for r in rooms], indent=2))
    elif rooms:
        print(format_table(rooms))
    else:
        print("No rooms to show.")

    return 2 if any(r.is_overbooked for r in rooms) else 0


if __name__ == "__main__":
    sys.exit(main())
