import argparse
import sys
from typing import List, Optional

from rich.console import Console

import cli.run
import cli.stage
import cli.tokens
from infra.errors import PipelineError


def create_parser():
    parser = argparse.ArgumentParser(
        prog='shutterpress',
        description='shutterpress - Unsplash collection → Gemini blog posts → Ghost',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Full pipeline - download, generate content, publish to Ghost
  shutterpress run -k UNSPLASH_KEY -i 12345678 -g GEMINI_KEY -G "ghost_id:ghost_secret" -u https://myblog.com

  # Download 50 images and create published posts
  shutterpress run -k UNSPLASH_KEY -i 12345678 -c 50 -g GEMINI_KEY -G "id:secret" -u https://myblog.com --ghost-status published

  # Skip download, reuse an existing folder
  shutterpress run --skip-download -d existing_folder -g GEMINI_KEY -G "id:secret" -u https://myblog.com

  # Generate content only (no Ghost export)
  shutterpress run -k UNSPLASH_KEY -i 12345678 -g GEMINI_KEY --skip-ghost

  # Single stages
  shutterpress fetch -k UNSPLASH_KEY -i 12345678 -c 20
  shutterpress generate -d 12345678_city_nights -m gemini-2.5-flash
  shutterpress publish -d 12345678_city_nights --dry-run

  # Utilities
  shutterpress estimate-tokens "Some prompt text" --media
  shutterpress stages

Credentials can also come from the environment (or a .env file):
  UNSPLASH_API_KEY, GEMINI_API_KEY, GEMINI_MODEL, GHOST_ADMIN_API_KEY, GHOST_URL
"""
    )

    subparsers = parser.add_subparsers(dest='command', help='Command')
    subparsers.required = True

    cli.run.setup_parser(subparsers)
    cli.stage.setup_parser(subparsers)
    cli.tokens.setup_parser(subparsers)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    console = Console(stderr=True)

    try:
        return args.func(args) or 0
    except PipelineError as e:
        console.print(f"[red]❌ {e}[/red]")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Interrupted[/yellow]")
        return 130
