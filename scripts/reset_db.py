#!/usr/bin/env python3
"""
Reset the stored document to the defaults
Usage: python scripts/reset_db.py [--yes] [--keep-cache]
"""

import argparse
import asyncio
import logging
import sys

from checkmate.config import get_config
from checkmate.core.database import default_document
from checkmate.services.document_store import CACHE_KEY, LocalCache, create_document_store
from checkmate.utils.logger import setup_logger

logger = logging.getLogger(__name__)

async def reset(keep_cache: bool) -> bool:
    config = get_config()
    store = create_document_store(config)

    if not await store.save(default_document()):
        logger.error(f"❌ Could not write the default document to the {store.name} store")
        return False

    if not keep_cache:
        LocalCache(config.storage.cache_path).remove(CACHE_KEY)

    logger.info(f"✅ {store.name} store reset to defaults")
    return True

def main():
    parser = argparse.ArgumentParser(description="Replace all checkmate data with the default document")
    parser.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    parser.add_argument("--keep-cache", action="store_true", help="leave the local fallback cache untouched")
    args = parser.parse_args()

    setup_logger(str(get_config().log_dir / "reset_db.log"))
    logging.getLogger().addHandler(logging.StreamHandler(sys.stdout))

    if not args.yes:
        answer = input("This deletes every participant, record and fine. Continue? [y/N] ")
        if answer.strip().lower() != "y":
            print("Cancelled")
            return 1

    return 0 if asyncio.run(reset(args.keep_cache)) else 1

if __name__ == "__main__":
    sys.exit(main())
