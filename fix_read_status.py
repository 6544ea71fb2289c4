#!/usr/bin/env python3
"""One-off correction: mark every existing message as read."""
import asyncio
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from lms_chat.core.config import Settings
from lms_chat.core.database import create_database
from lms_chat.core.logging import setup_logging
from lms_chat.services.chat_service import ChatService

logger = logging.getLogger("fix_read_status")

async def fix_read_status(settings: Settings) -> int:
    database = create_database(settings)
    try:
        async with database.session() as session:
            logger.info("Updating all existing messages to READ...")
            updated = await ChatService(session).mark_all_read()
            logger.info(f"Updated {updated} messages.")
            return updated
    finally:
        await database.dispose()

def main() -> int:
    settings = Settings()
    setup_logging(settings)
    try:
        asyncio.run(fix_read_status(settings))
    except Exception as e:
        logger.error(f"Read repair failed: {e}")
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
