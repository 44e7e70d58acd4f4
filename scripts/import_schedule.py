#!/usr/bin/env python3
"""
Import a Channel Schedule from JSON

Loads an ordered list of videos into a channel loop. The channel (and its
timeline anchor) is created if the slug does not exist yet.

The source file is a JSON array of records:

    [{"position": 0, "youtube_video_id": "abc123", "title": "...", "duration_seconds": 245}, ...]

Usage:
    python scripts/import_schedule.py SLUG SCHEDULE.json [--title TITLE] [--append] [--dry-run]

Options:
    --title      Title for a newly created channel (defaults to the slug)
    --append     Keep existing items and add after them
    --dry-run    Show what would be imported without making changes
"""

import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import Any

from sqlalchemy import delete, func, select

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from handpicked.database import get_sync_session
from handpicked.database.models import Channel, ChannelScheduleItem, ChannelTimeline, utcnow

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Control characters other than tab, newline and carriage return
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def load_records(path: Path) -> list[dict[str, Any]]:
    """Read the schedule file, sorted by position, dropping unusable records."""
    raw = path.read_text(encoding="utf-8")
    data = json.loads(CONTROL_CHARS.sub(" ", raw))

    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array")

    records = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            logger.warning(f"Skipping record {index}: not an object")
            continue

        video_id = entry.get("youtube_video_id")
        duration = entry.get("duration_seconds")

        if not video_id:
            logger.warning(f"Skipping record {index}: no youtube_video_id")
            continue
        # bool is an int subclass; true is not a duration
        if isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0:
            logger.warning(f"Skipping record {index} ({video_id}): invalid duration {duration!r}")
            continue

        position = entry.get("position")
        if isinstance(position, bool) or not isinstance(position, int):
            position = index

        records.append({
            "position": position,
            "youtube_video_id": video_id,
            "title": entry.get("title"),
            "duration_seconds": duration,
        })

    records.sort(key=lambda r: r["position"])
    return records


def get_or_create_channel(session, slug: str, title: str | None) -> Channel:
    """Find a channel by slug, creating it with a timeline anchored now."""
    channel = session.execute(select(Channel).where(Channel.slug == slug)).scalar_one_or_none()
    if channel:
        if channel.timeline is None:
            channel.timeline = ChannelTimeline(start_time=utcnow())
            logger.info(f"Created missing timeline for channel '{slug}'")
        return channel

    channel = Channel(slug=slug, title=title or slug)
    channel.timeline = ChannelTimeline(start_time=utcnow())
    session.add(channel)
    session.flush()
    logger.info(f"Created channel '{slug}' (id {channel.id})")
    return channel


def import_schedule(slug: str, path: Path, title: str | None, append: bool, dry_run: bool) -> int:
    """
    Import the schedule file into the channel.

    Returns:
        Number of items written (or that would be written).
    """
    records = load_records(path)
    logger.info(f"Loaded {len(records)} record(s) from {path}")

    if dry_run:
        total = sum(r["duration_seconds"] for r in records)
        logger.info(f"[DRY RUN] Would import {len(records)} item(s) into '{slug}', loop length {total}s")
        return len(records)

    session = get_sync_session()
    try:
        channel = get_or_create_channel(session, slug, title)

        start = 0
        if append:
            last = session.execute(
                select(func.max(ChannelScheduleItem.position))
                .where(ChannelScheduleItem.channel_id == channel.id)
            ).scalar_one_or_none()
            start = 0 if last is None else last + 1
        else:
            removed = session.execute(
                delete(ChannelScheduleItem).where(ChannelScheduleItem.channel_id == channel.id)
            ).rowcount
            if removed:
                logger.info(f"Removed {removed} existing item(s) from '{slug}'")

        # Positions are renumbered densely from the starting point
        for offset, record in enumerate(records):
            session.add(ChannelScheduleItem(
                channel_id=channel.id,
                position=start + offset,
                youtube_video_id=record["youtube_video_id"],
                title=record["title"],
                duration_seconds=record["duration_seconds"],
            ))

        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

    logger.info(f"Imported {len(records)} item(s) into '{slug}'")
    return len(records)


def main():
    parser = argparse.ArgumentParser(description="Import a channel schedule from JSON")
    parser.add_argument("slug", help="Channel slug")
    parser.add_argument("schedule", type=Path, help="Path to the schedule JSON file")
    parser.add_argument("--title", help="Title for a newly created channel")
    parser.add_argument("--append", action="store_true", help="Keep existing items")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be imported")
    args = parser.parse_args()

    if not args.schedule.exists():
        logger.error(f"Schedule file not found: {args.schedule}")
        sys.exit(1)

    try:
        import_schedule(args.slug, args.schedule, args.title, args.append, args.dry_run)
    except (ValueError, json.JSONDecodeError) as e:
        logger.error(f"Invalid schedule file: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
