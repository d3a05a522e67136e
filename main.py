"""
Repository browser crawler entry point

Run with: python main.py --root https://models.interlis.ch --output snapshot.json
"""

import argparse
import asyncio
import sys
from pathlib import Path

from repobrowser.config import Config
from repobrowser.services.repository_update import RepositoryUpdateService
from repobrowser.utils.logger import setup_logging


async def run_update(
    config: Config, root: str | None, ignore: list[str] | None, output: str | None
) -> int:
    async with RepositoryUpdateService.from_config(config) as service:
        snapshot = await service.update(root_uri=root, ignore_list=ignore)

    payload = snapshot.model_dump_json(indent=2)
    if output:
        Path(output).write_text(payload, encoding="utf-8")
    else:
        sys.stdout.write(payload + "\n")

    return 1 if snapshot.is_empty else 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Crawl INTERLIS model repositories")
    parser.add_argument("--root", help="Root repository location (default from config)")
    parser.add_argument(
        "--ignore",
        action="append",
        default=None,
        help="Repository location to skip, with its subtree (repeatable)",
    )
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--env-file", help=".env file with REPOBROWSER_* variables")
    parser.add_argument("--output", help="Write the snapshot JSON to this file instead of stdout")

    args = parser.parse_args(argv)

    config = Config.from_env_or_yaml(yaml_path=args.config, env_file=args.env_file)
    setup_logging(**config.logging.model_dump())

    return asyncio.run(run_update(config, args.root, args.ignore, args.output))


if __name__ == "__main__":
    raise SystemExit(main())
