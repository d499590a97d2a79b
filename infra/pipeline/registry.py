"""Stages in run order. Classes are imported on first use so `stages` and
config validation never pull in the service adapters."""

import importlib
from typing import Dict, List, NamedTuple, Type


class StageEntry(NamedTuple):
    name: str
    module: str
    class_name: str
    settings_section: str  # PipelineConfig attribute holding the stage's settings


STAGE_DEFINITIONS = [
    StageEntry('fetch', 'pipeline.fetch', 'FetchStage', 'unsplash'),
    StageEntry('generate', 'pipeline.generate', 'GenerateStage', 'gemini'),
    StageEntry('publish', 'pipeline.publish', 'PublishStage', 'ghost'),
]

STAGE_NAMES = [entry.name for entry in STAGE_DEFINITIONS]

_BY_NAME = {entry.name: entry for entry in STAGE_DEFINITIONS}


def get_stage_entry(stage_name: str) -> StageEntry:
    try:
        return _BY_NAME[stage_name]
    except KeyError:
        raise ValueError(
            f"Unknown stage: {stage_name} (expected one of: {', '.join(STAGE_NAMES)})"
        ) from None


def get_stage_class(stage_name: str) -> Type:
    entry = get_stage_entry(stage_name)
    return getattr(importlib.import_module(entry.module), entry.class_name)


def get_all_stage_metadata() -> List[Dict]:
    """Display metadata for the `stages` command, read off the stage classes."""
    metadata = []
    for entry in STAGE_DEFINITIONS:
        stage_class = get_stage_class(entry.name)
        metadata.append({
            'name': entry.name,
            'icon': stage_class.icon,
            'short_name': stage_class.short_name or entry.name,
            'description': stage_class.description,
            'consumes': stage_class.consumes,
        })
    return metadata
