"""Argument groups shared by `run` and the single-stage commands.

Every option defaults to None so that only flags given on the command
line override the YAML file and the environment.
"""

from pathlib import Path

from infra.llm.gemini.limits import DEFAULT_MODEL, SUPPORTED_MODELS


def add_common_args(parser):
    parser.add_argument('--config', type=Path, help='YAML config file (supports ${ENV_VAR})')
    parser.add_argument('-v', '--verbose', action='store_true', default=None, help='Enable verbose output')
    parser.add_argument('--log-dir', type=Path, help='Directory for JSONL logs (default: <dir>/logs)')


def add_path_args(parser):
    group = parser.add_argument_group('paths')
    group.add_argument('-d', '--dir', type=Path,
                       help='Work directory (default: [collection_id]_[collection_slug])')
    group.add_argument('-o', '--output', '--listing', dest='output', type=Path,
                       help='Listing CSV (default: image_metadata.csv in the work directory)')
    group.add_argument('-j', '--json', '--enriched', dest='json', type=Path,
                       help='Enriched JSON (default: listing name with .json)')
    group.add_argument('--report', type=Path,
                       help='Publish report JSON (default: publish_report.json beside the enriched JSON)')


def add_unsplash_args(parser):
    group = parser.add_argument_group('unsplash')
    group.add_argument('-k', '--unsplash-api-key', help='Unsplash API access key')
    group.add_argument('-i', '--collection-id', help='Collection ID to download from')
    group.add_argument('-c', '--count', type=int, help='Number of images to download (default: 10)')


def add_gemini_args(parser):
    group = parser.add_argument_group('gemini')
    group.add_argument('-g', '--gemini-api-key', help='Gemini API key for content generation')
    group.add_argument('-m', '--gemini-model',
                       help=f"Gemini model, e.g. {', '.join(SUPPORTED_MODELS)} (default: {DEFAULT_MODEL})")
    group.add_argument('-t', '--temperature', type=float, help='Model temperature 0.0-1.0 (default: 0.7)')
    group.add_argument('--delay', type=float, help='Delay between API requests (default: auto based on model)')


def add_ghost_args(parser):
    group = parser.add_argument_group('ghost')
    group.add_argument('-G', '--ghost-api-key', help='Ghost Admin API key (id:secret format)')
    group.add_argument('-u', '--ghost-url', help='Ghost site URL (e.g., https://yourblog.com)')
    group.add_argument('--ghost-type', choices=['post', 'page'], help="Content type (default: post)")
    group.add_argument('--ghost-status', choices=['draft', 'published'], help="Publication status (default: draft)")
    group.add_argument('--ghost-author', help='Author ID (optional)')
    group.add_argument('--dry-run', action='store_true', default=None,
                       help='Show what would be created without posting to Ghost')
