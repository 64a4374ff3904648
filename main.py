#!/usr/bin/python
import os
import logging

import discord
from discord.ext import commands
from dotenv import load_dotenv
from puzzlelog.core.catalog import GameCatalog
from puzzlelog.core.dates import DatesConfig
from puzzlelog.core.game_protocol import ParseError
from puzzlelog.core.runtime import (
    catchup,
    describe_reset,
    ingest_text,
    parse_result,
    print_streaks,
    remind_streaks_at_risk,
)
from puzzlelog.core.scheduler import schedule_game_resets

load_dotenv()

CMD_PREFIX = '!'

players = {}
catalog = GameCatalog()

# Logging setup
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

intents = discord.Intents(messages=True, message_content=True, guilds=True, members=True)
bot = commands.Bot(command_prefix=CMD_PREFIX, intents=intents)


def required_env(name: str) -> str:
    v = os.environ.get(name)
    if v is None or v == "":
        raise RuntimeError(f"Missing required env var: {name}")
    return v

def _env_bool(name: str, default: bool = False) -> bool:
    v = os.environ.get(name)
    if v is None:
        return default
    v = v.strip().lower()
    return v in ("1", "true", "t", "yes", "y", "on")


DISCORD_TOKEN = required_env("DISCORD_BOT_TOKEN")
INPUT_CHANNEL_ID = required_env("INPUT_CHANNEL_ID")
OUTPUT_CHANNEL_ID = required_env("OUTPUT_CHANNEL_ID")
SEND_RESULTS = _env_bool("SEND_RESULTS", default=False)
DATES = DatesConfig(min_date=os.environ.get("HISTORY_MIN_DATE", DatesConfig.min_date))


def _on_reset(game):
    output_channel = bot.get_channel(int(OUTPUT_CHANNEL_ID))
    return remind_streaks_at_risk(output_channel, players, game)


@bot.event
async def on_ready():
    logger.info("Bot is ready. Guilds: %s", [g.name for g in bot.guilds])
    input_channel = bot.get_channel(int(INPUT_CHANNEL_ID))
    output_channel = bot.get_channel(int(OUTPUT_CHANNEL_ID))
    await catchup(input_channel, players, catalog, DATES)
    await print_streaks(output_channel, players, bot, catalog, SEND_RESULTS)
    schedule_game_resets(catalog, _on_reset)

@bot.command()
async def streaks(ctx):
    logger.info("!streaks invoked by %s in #%s", ctx.author, getattr(ctx.channel, "name", ctx.channel))
    await print_streaks(ctx.channel, players, bot, catalog, SEND_RESULTS)

@bot.command()
async def log(ctx, game_name: str, *, text: str):
    """!log <game> <share text>: store a share text for a specific game."""
    logger.info("!log invoked by %s for %s", ctx.author, game_name)
    if catalog.get(game_name) is None:
        await ctx.reply(f"Unknown game '{game_name}'. Try !games.")
        return
    try:
        record = await ingest_text(ctx.author, text, ctx.message.created_at, players, catalog,
                                   expected_game=game_name)
    except ParseError as e:
        await ctx.reply(f"❌ {e}")
        return
    if record is None:
        await ctx.reply("Already logged for this puzzle.")
        return
    s = record.metadata
    await ctx.reply(f"Logged {game_name} #{record.puzzle_number}: 🔥 {s.playstreak} • 🏆 {s.winstreak} (best {s.max_winstreak})")

@bot.command()
async def reset(ctx, game_name: str = None):
    games = [catalog.get(game_name)] if game_name else list(catalog)
    if games == [None]:
        await ctx.reply(f"Unknown game '{game_name}'.")
        return
    await ctx.send("\n".join(describe_reset(g) for g in games))

@bot.command()
async def games(ctx):
    await ctx.send(", ".join(sorted(g.display_name for g in catalog)))


@bot.event
async def on_message(msg):
    if msg.author == bot.user or getattr(msg.author, "bot", False):
        return
    is_command = (msg.content or "").startswith(CMD_PREFIX)
    if not is_command and msg.channel.id == int(INPUT_CHANNEL_ID):
        logger.debug(
            "on_message: guild=%s channel=%s author=%s content='%s...'",
            getattr(getattr(msg, "guild", None), "name", None),
            getattr(getattr(msg, "channel", None), "name", None),
            getattr(getattr(msg, "author", None), "name", None),
            (getattr(msg, "content", "") or "")[:120]
        )
        count = await parse_result(msg, players, catalog)
        if count:
            logger.info("on_message: ingested %s results from message id=%s", count, getattr(msg, "id", None))
            await msg.add_reaction("✅")
    await bot.process_commands(msg)


if __name__ == "__main__":
    bot.run(DISCORD_TOKEN)
