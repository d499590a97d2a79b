#!/usr/bin/env python3
"""
shutterpress CLI - Unsplash collection → Gemini blog posts → Ghost

Commands:
  shutterpress run                 Run the full pipeline (fetch → generate → publish)
  shutterpress fetch               Download a collection and write image_metadata.csv
  shutterpress generate            Write blog posts for an existing listing
  shutterpress publish             Create Ghost posts/pages from an enriched listing
  shutterpress estimate-tokens     Estimate the token cost of a prompt
  shutterpress stages              List pipeline stages
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from cli import main


if __name__ == '__main__':
    sys.exit(main())
