"""
Generate demo data for the in-memory record store

Writes clients, policies and tasks to the configured seed file
(SEED_DATA_PATH, default data/seed.json).

Usage:
    python scripts/seed_demo_data.py [--seed 42] [--output data/seed.json]
"""

import sys
import os
import argparse
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
os.chdir(project_root)

from loguru import logger

from src.config.settings import settings
from src.store.seed import write_seed_file


def main():
    parser = argparse.ArgumentParser(description="Generate demo data for the advisor assistant")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducible data")
    parser.add_argument("--output", default=settings.seed_data_path, help="Output JSON path")
    args = parser.parse_args()

    output = settings.resolve_path(args.output)
    counts = write_seed_file(output, seed=args.seed)
    logger.info(f"✅ Seed data ready: {counts['clients']} clients, {counts['policies']} policies, {counts['tasks']} tasks")


if __name__ == "__main__":
    main()
