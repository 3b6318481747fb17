"""Workout documents in, timeline JSON out."""

from ghosting_engine.serialization.document import (
    dump_workout,
    dumps_workout,
    load_workout,
    loads_workout,
    normalize_document,
)
from ghosting_engine.serialization.timeline_json import (
    timeline_from_json,
    timeline_to_json,
    timeline_to_json_string,
)

__all__ = [
    "dump_workout",
    "dumps_workout",
    "load_workout",
    "loads_workout",
    "normalize_document",
    "timeline_from_json",
    "timeline_to_json",
    "timeline_to_json_string",
]
