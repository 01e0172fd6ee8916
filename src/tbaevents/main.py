from __future__ import annotations

import logging

from dotenv import load_dotenv

from .bot import EventsBot
from .config import Settings


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # httpx logs every request URL at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    load_dotenv()
    settings = Settings.from_env()
    bot = EventsBot(settings)
    bot.run()


if __name__ == "__main__":
    main()
