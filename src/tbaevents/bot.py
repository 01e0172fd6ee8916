from __future__ import annotations

import logging
import re
from datetime import datetime
from html import unescape

import httpx
from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.constants import ParseMode
from telegram.error import BadRequest, NetworkError, TelegramError
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
)

from .config import Settings
from .formatters import format_event, format_events
from .models import Event
from .tba import TBAClient

EVENT_CACHE_KEY = "events_cache"
LOGGER = logging.getLogger(__name__)
EVENT_KEY_RE = re.compile(r"^(?:19|20)\d{2}[a-z0-9]+$", re.IGNORECASE)


class EventsBot:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.tba = TBAClient(
            base_url=settings.tba_base_url,
            auth_key=settings.tba_auth_key,
            timeout_seconds=settings.tba_timeout_seconds,
        )
        self.app = Application.builder().token(settings.telegram_bot_token).build()
        self._register_handlers()

    def _register_handlers(self) -> None:
        self.app.add_handler(CommandHandler("start", self.start))
        self.app.add_handler(CommandHandler("help", self.help_cmd))
        self.app.add_handler(CommandHandler("events", self.events))
        self.app.add_handler(CommandHandler("event", self.event))
        self.app.add_handler(CallbackQueryHandler(self.on_event_selected, pattern=r"^event:"))
        self.app.add_error_handler(self.on_error)

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await update.message.reply_text(
            "I list FIRST Robotics Competition events from The Blue Alliance.\n"
            "1) /events 2019 lists a season, grouped by week\n"
            "2) /event 2019miket shows a single event",
        )

    async def help_cmd(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await update.message.reply_text(
            "How to use:\n"
            "- /events [year] (defaults to the current season)\n"
            "- /event <event key>, e.g. /event 2016casj\n"
            "- Tap an event button to see its dates, week and webcasts",
        )

    async def events(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        msg = update.message
        if msg is None:
            return

        year = datetime.now().year
        if context.args:
            try:
                year = int(context.args[0])
            except ValueError:
                await msg.reply_text("Invalid year. Example: /events 2019")
                return

        await msg.reply_text("Fetching events from The Blue Alliance. Please wait...")
        try:
            events = await self.tba.fetch_events(year)
        except httpx.HTTPError as exc:
            LOGGER.warning("Could not load events for %d: %s", year, exc)
            await msg.reply_text("The Blue Alliance did not answer. Please try again later.")
            return

        context.bot_data[EVENT_CACHE_KEY] = {event.key: event for event in events}

        keyboard = [
            [InlineKeyboardButton(text=self._button_text(e), callback_data=f"event:{e.key}")]
            for e in events[:25]
        ]
        reply_markup = InlineKeyboardMarkup(keyboard) if keyboard else None

        await self._safe_send_message(
            context=context,
            chat_id=msg.chat_id,
            text=format_events(events),
            parse_mode=ParseMode.HTML,
            reply_markup=reply_markup,
        )

    async def event(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        msg = update.message
        if msg is None:
            return

        event_key = (context.args[0] if context.args else "").strip().lower()
        if not EVENT_KEY_RE.match(event_key):
            await msg.reply_text("Send an event key. Example: /event 2019miket")
            return

        event = await self._load_event(event_key, context)
        if event is None:
            await msg.reply_text("I could not load that event key. Please check and send again.")
            return
        await self._safe_send_message(
            context=context,
            chat_id=msg.chat_id,
            text=format_event(event),
            parse_mode=ParseMode.HTML,
        )

    async def on_event_selected(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        if query is None or query.data is None:
            return

        await query.answer()
        event_key = query.data.split(":", 1)[1]
        event = await self._load_event(event_key, context)
        if event is None:
            await query.edit_message_text(
                "I could not find that event. Run /events again or use /event <key>."
            )
            return

        await self._safe_send_message(
            context=context,
            chat_id=query.message.chat_id,
            text=format_event(event),
            parse_mode=ParseMode.HTML,
        )

    async def _load_event(self, event_key: str, context: ContextTypes.DEFAULT_TYPE) -> Event | None:
        event_map: dict[str, Event] = context.bot_data.get(EVENT_CACHE_KEY, {})
        event = event_map.get(event_key)
        if event is not None:
            return event
        try:
            event = await self.tba.fetch_event(event_key)
        except (httpx.HTTPError, ValueError) as exc:
            LOGGER.warning("Could not load event %s: %s", event_key, exc)
            return None
        if event is not None:
            context.bot_data.setdefault(EVENT_CACHE_KEY, {})[event.key] = event
        return event

    async def on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        LOGGER.error("Update %r failed", update, exc_info=context.error)
        chat = update.effective_chat if isinstance(update, Update) else None
        if chat is None or isinstance(context.error, NetworkError):
            return
        try:
            await context.bot.send_message(
                chat_id=chat.id,
                text="Something went wrong while handling that request. Please try again.",
            )
        except TelegramError as exc:
            LOGGER.warning("Could not report the error to chat %s: %s", chat.id, exc)

    async def _safe_send_message(
        self,
        *,
        context: ContextTypes.DEFAULT_TYPE,
        chat_id: int,
        text: str,
        parse_mode: str | None = None,
        reply_markup: InlineKeyboardMarkup | None = None,
    ) -> None:
        """Send ``text`` in chunks; buttons ride on the last chunk.

        A chunk Telegram rejects as bad HTML is resent as plain text.
        """
        chunks = self._split_message(text, limit=3500)
        for i, chunk in enumerate(chunks):
            markup = reply_markup if i == len(chunks) - 1 else None
            try:
                await context.bot.send_message(
                    chat_id=chat_id, text=chunk, parse_mode=parse_mode, reply_markup=markup
                )
            except BadRequest as exc:
                LOGGER.warning("HTML send to %s rejected (%s), sending plain text", chat_id, exc)
                plain_chunks = self._split_message(self._strip_html(chunk), limit=3900)
                for j, plain_chunk in enumerate(plain_chunks):
                    await context.bot.send_message(
                        chat_id=chat_id,
                        text=plain_chunk,
                        reply_markup=markup if j == len(plain_chunks) - 1 else None,
                    )

    @staticmethod
    def _button_text(event: Event) -> str:
        name = event.short_name or event.name or event.key
        return f"{event.year} {name}"[:60]

    @staticmethod
    def _split_message(text: str, limit: int = 3500) -> list[str]:
        if len(text) <= limit:
            return [text]
        out: list[str] = []
        remaining = text
        while len(remaining) > limit:
            # Cut on a blank line so a week section header stays with its events.
            cut = remaining.rfind("\n\n", 0, limit)
            if cut < limit // 2:
                cut = remaining.rfind("\n", 0, limit)
            if cut < limit // 2:
                cut = limit
            out.append(remaining[:cut].strip())
            remaining = remaining[cut:].strip()
        if remaining:
            out.append(remaining)
        return out

    @staticmethod
    def _strip_html(text: str) -> str:
        text = re.sub(r"</?(?:b|i|u|strong|em|code|pre)>", "", text, flags=re.IGNORECASE)
        text = re.sub(r"<[^>]+>", "", text)
        return unescape(text)

    def run(self) -> None:
        LOGGER.info("Polling Telegram for updates (TBA API at %s)", self.settings.tba_base_url)
        try:
            self.app.run_polling()
        except NetworkError as exc:
            LOGGER.error("Telegram API unreachable: %s", exc)
            raise
        except TelegramError as exc:
            LOGGER.error("Telegram rejected the bot at startup: %s", exc)
            raise

