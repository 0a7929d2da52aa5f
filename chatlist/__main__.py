"""Command-line entry point for the chat list.

    python -m chatlist list     # print the sidebar
    python -m chatlist new      # create a conversation, then print the sidebar
"""

import argparse
import asyncio
import logging
import sys

from chatlist.config import settings
from chatlist.dependencies import ChatListSession
from chatlist.views.sidebar import render_sidebar

logger = logging.getLogger(__name__)


async def main(command: str) -> int:
    alerts: list[str] = []

    async with ChatListSession(settings, alert=alerts.append) as session:
        await session.cache.read()

        if command == "new":
            created = await session.coordinator.create_conversation()
            if created is None:
                for message in alerts:
                    print(message, file=sys.stderr)
                return 1
            print(render_sidebar(session.sidebar()))
            # Let the scheduled reconcile run before the session closes
            await asyncio.sleep(settings.reconcile_delay_seconds + 0.1)
            print()

        print(render_sidebar(session.sidebar()))
    return 0


def run() -> None:
    parser = argparse.ArgumentParser(prog="chatlist", description=settings.app_name)
    parser.add_argument("command", choices=["list", "new"], nargs="?", default="list")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        sys.exit(asyncio.run(main(args.command)))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    run()
