from infra.config import load_pipeline_config
from infra.pipeline.runner import run_pipeline
from cli.helpers import build_storage, build_stages
from cli.options import (
    add_common_args,
    add_path_args,
    add_unsplash_args,
    add_gemini_args,
    add_ghost_args,
)


def cmd_run(args):
    config = load_pipeline_config(args)
    config.require_credentials()

    storage = build_storage(config)
    try:
        run = run_pipeline(build_stages(config, storage), skip=config.skip)
    finally:
        storage.close_loggers()

    return 0 if run.is_terminal else 1


def setup_parser(subparsers):
    run_parser = subparsers.add_parser(
        'run',
        help='Run the full pipeline: download → generate → publish'
    )
    add_unsplash_args(run_parser)
    add_gemini_args(run_parser)
    add_ghost_args(run_parser)
    add_path_args(run_parser)

    control = run_parser.add_argument_group('pipeline control')
    control.add_argument('--skip-download', action='store_true',
                         help='Skip Unsplash download step (use existing CSV)')
    control.add_argument('--skip-content', action='store_true',
                         help='Skip content generation step (use existing JSON)')
    control.add_argument('--skip-ghost', action='store_true',
                         help='Skip Ghost CMS export step')

    add_common_args(run_parser)
    run_parser.set_defaults(func=cmd_run)
