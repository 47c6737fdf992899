"""Target file loader — reads targets.yaml into typed definitions.

Format:

    targets:
      - id: api
        endpoint: http://api.internal:8000/health
        interval_seconds: 5
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from src.config import settings
from src.probing.registry import ProbeRegistry, TargetExistsError

logger = logging.getLogger(__name__)


@dataclass
class TargetDef:
    """A single target to probe over HTTP."""

    id: str
    endpoint: str
    interval_seconds: float = 5.0


def load_targets(path: Path | None = None) -> list[TargetDef]:
    """Parse the target file. A missing or unreadable file yields no targets."""
    path = path or Path(settings.probe_targets_file)
    if not path.exists():
        logger.warning("Target file not found: %s", path)
        return []

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        logger.error("Failed to parse %s: %s", path, e)
        return []

    if not isinstance(raw, dict):
        logger.warning("Expected a mapping at the top of %s, got %s", path, type(raw).__name__)
        return []

    entries = raw.get("targets") or []
    if not isinstance(entries, list):
        logger.warning("'targets' in %s must be a list, got %s", path, type(entries).__name__)
        return []

    targets = []
    for entry in entries:
        try:
            targets.append(_parse_target(entry))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed target entry %r: %s", entry, e)

    logger.info("Loaded %d targets from %s", len(targets), path)
    return targets


def register_targets(registry: ProbeRegistry, targets: list[TargetDef]) -> int:
    """Add every definition to the registry; duplicates are skipped."""
    added = 0
    for t in targets:
        try:
            registry.add_http(t.id, t.interval_seconds, t.endpoint)
            added += 1
        except TargetExistsError:
            logger.warning("Duplicate target id '%s', skipped", t.id)
    return added


def _parse_target(raw: dict[str, Any]) -> TargetDef:
    target_id = str(raw["id"]).strip()
    endpoint = str(raw["endpoint"]).strip()
    if not target_id or not endpoint:
        raise ValueError("'id' and 'endpoint' must be non-empty")

    interval = float(raw.get("interval_seconds", settings.probe_default_interval))
    if interval <= 0:
        raise ValueError(f"interval_seconds must be positive, got {interval}")

    return TargetDef(id=target_id, endpoint=endpoint, interval_seconds=interval)
