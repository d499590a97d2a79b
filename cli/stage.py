from rich.console import Console
from rich.table import Table

from infra.config import load_pipeline_config
from infra.pipeline.registry import STAGE_NAMES, get_all_stage_metadata
from infra.pipeline.runner import run_pipeline
from cli.helpers import build_storage, build_stages
from cli.options import (
    add_common_args,
    add_path_args,
    add_unsplash_args,
    add_gemini_args,
    add_ghost_args,
)


def cmd_stage(args):
    """Run one stage through the same sequencer as `run`, skipping the others."""
    config = load_pipeline_config(args)
    others = [name for name in STAGE_NAMES if name != args.stage_name]
    config = config.model_copy(update={'skip': others})
    config.require_credentials([args.stage_name])

    storage = build_storage(config)
    try:
        run = run_pipeline(build_stages(config, storage), skip=others)
    finally:
        storage.close_loggers()

    return 0 if run.is_terminal else 1


def cmd_stages(args):
    table = Table(title="Pipeline stages")
    table.add_column("")
    table.add_column("Stage")
    table.add_column("Reads")
    table.add_column("Description")

    for stage in get_all_stage_metadata():
        table.add_row(stage['icon'], stage['name'], stage['consumes'] or "-", stage['description'])

    Console().print(table)
    return 0


def setup_parser(subparsers):
    fetch_parser = subparsers.add_parser('fetch', help='Download photos and metadata from an Unsplash collection')
    add_unsplash_args(fetch_parser)
    add_path_args(fetch_parser)
    add_common_args(fetch_parser)
    fetch_parser.set_defaults(func=cmd_stage, stage_name='fetch')

    generate_parser = subparsers.add_parser('generate', help='Generate blog content for an existing listing')
    add_gemini_args(generate_parser)
    add_path_args(generate_parser)
    add_common_args(generate_parser)
    generate_parser.set_defaults(func=cmd_stage, stage_name='generate')

    publish_parser = subparsers.add_parser('publish', help='Publish an existing enriched listing to Ghost')
    add_ghost_args(publish_parser)
    add_path_args(publish_parser)
    add_common_args(publish_parser)
    publish_parser.set_defaults(func=cmd_stage, stage_name='publish')

    stages_parser = subparsers.add_parser('stages', help='List pipeline stages')
    stages_parser.set_defaults(func=cmd_stages)
