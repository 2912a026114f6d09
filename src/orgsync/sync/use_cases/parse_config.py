"""Parse the sync-group configuration string.

Format (one parenthesized record per sync-group, fields separated by ``;``):

    (name; stagingID,productionID; source1,source2,...)(name2; ...)

Every token is trimmed. Source group names are lower-cased; target IDs
are parsed as integers, an empty ID token meaning "not configured for
that environment". Malformed records are skipped with a warning; only a
configuration with no usable record at all is fatal.
"""

import logging
import re

from ...api.exceptions import ConfigurationError
from ..domain.entities import SyncGroupDefinition

logger = logging.getLogger(__name__)

RECORD_BOUNDARY = re.compile(r"[()]")
FIELD_SEPARATOR = ";"
LIST_SEPARATOR = ","


def parse_sync_groups(raw: str | None) -> dict[str, SyncGroupDefinition]:
    """Build the name -> SyncGroupDefinition mapping from a raw config string.

    Args:
        raw: Configuration string, e.g. "(A; 1,2; x,y)(B; 3,4; z)"

    Returns:
        Mapping keyed by sync-group name, in configuration order

    Raises:
        ConfigurationError: If the string holds no record, or no record
            survives validation
    """
    candidates = [segment.strip() for segment in RECORD_BOUNDARY.split(raw or "")]
    candidates = [segment for segment in candidates if segment]

    if not candidates:
        raise ConfigurationError("Sync-group configuration is empty")

    groups: dict[str, SyncGroupDefinition] = {}
    for record in candidates:
        definition = _parse_record(record)
        if definition is None:
            continue
        if definition.name in groups:
            logger.warning(f"Sync-group '{definition.name}' defined twice, keeping the last one")
        groups[definition.name] = definition

    if not groups:
        raise ConfigurationError(
            "Sync-group configuration has no valid records",
            details={"records": len(candidates)},
        )

    logger.info(f"Parsed {len(groups)} sync-group(s): {', '.join(groups)}")
    return groups


def _parse_record(record: str) -> SyncGroupDefinition | None:
    """Parse one ``name; ids; sources`` record, or None if malformed."""
    fields = [f.strip() for f in record.split(FIELD_SEPARATOR)]
    if len(fields) != 3:
        logger.warning(
            f"Skipping malformed sync-group record {record!r}: "
            f"expected 3 ';'-separated fields, got {len(fields)}"
        )
        return None

    name, ids_field, sources_field = fields
    if not name:
        logger.warning(f"Skipping sync-group record {record!r}: name is empty")
        return None

    id_tokens = [token.strip() for token in ids_field.split(LIST_SEPARATOR)]
    if len(id_tokens) != 2:
        logger.warning(
            f"Skipping sync-group '{name}': expected 'stagingID,productionID', got {ids_field!r}"
        )
        return None

    try:
        target_ids = tuple(int(token) if token else None for token in id_tokens)
    except ValueError:
        logger.warning(f"Skipping sync-group '{name}': target IDs must be integers, got {ids_field!r}")
        return None

    # dict.fromkeys keeps first-seen order while dropping repeats
    sources = dict.fromkeys(
        token.strip().lower() for token in sources_field.split(LIST_SEPARATOR) if token.strip()
    )

    return SyncGroupDefinition(
        name=name,
        target_ids=target_ids,
        source_groups=tuple(sources),
    )
