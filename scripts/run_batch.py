from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def main() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root / "src"))

    parser = argparse.ArgumentParser(description="Apply an operation chain to a batch of images.")
    parser.add_argument(
        "--config",
        default=str(repo_root / "config" / "config.toml"),
        help="Path to config TOML (default: config/config.toml).",
    )
    parser.add_argument("--overwrite", action="store_true", help="Rebuild destinations even if up to date.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Also log skipped files.")
    args = parser.parse_args()

    config_path = Path(args.config).expanduser().resolve()

    from dataclasses import replace

    from picture_batch.config import load_config
    from picture_batch.errors import PictureBatchError
    from picture_batch.pipeline import run_pipeline

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("picture_batch")

    try:
        config = load_config(config_path)
        if args.overwrite:
            config = replace(config, run=replace(config.run, overwrite=True))
        run_pipeline(config=config, config_path=config_path)
    except (PictureBatchError, OSError) as e:
        logger.debug("Run aborted", exc_info=True)
        logger.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
