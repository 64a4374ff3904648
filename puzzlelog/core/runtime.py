#!/usr/bin/python

from datetime import datetime
from typing import Dict, List, Optional
import logging

import discord

# Local imports
from .catalog import GameCatalog
from .dates import DatesConfig, format_time_until_reset
from .game_protocol import ParseError
from .models import Game, GameRecord, Timestamp
from .parser import parse_share_text
from .player import Player
from .streaks import display_streaks

logger = logging.getLogger(__name__)


def _get_player(players: Dict[int, Player], author) -> Player:
    player = players.get(author.id)
    if player is None:
        player = players[author.id] = Player(author)
        logger.debug("created Player for member_id=%s (%s)", author.id, getattr(author, "display_name", author.id))
    return player


# -----------------------------------------------------------------------------
# Ingest share texts
# -----------------------------------------------------------------------------
async def ingest_text(
    author,
    text: str,
    timestamp: Timestamp,
    players: Dict[int, Player],
    catalog: GameCatalog,
    expected_game: Optional[str] = None,
) -> Optional[GameRecord]:
    """
    Parse one share text and append it to the author's records.
    Raises ParseError when the text does not fit the grammar it was matched to
    (or the explicitly expected one). Returns None when nothing new was stored.
    """
    parsed = parse_share_text(text, expected_game)
    if parsed is None:
        return None

    game = catalog.get(expected_game) or catalog.get(parsed.game_name)
    if game is None:
        logger.debug("ingest_text: no tracked game for parsed name=%r", parsed.game_name)
        return None

    if parsed.parse_warnings:
        logger.warning("ingest_text: %s parse warnings for member_id=%s: %s",
                       game.display_name, author.id, "; ".join(parsed.parse_warnings))

    record = await _get_player(players, author).add_record(game, parsed, timestamp, share_text=text.strip())
    if record is not None:
        logger.info("ingest_text: stored member_id=%s game=%s puzzle=%s failed=%s streak=%s",
                    author.id, game.game_id, record.puzzle_number, record.failed, record.metadata)
    return record


async def parse_result(msg, players: Dict[int, Player], catalog: GameCatalog) -> int:
    """
    Auto-detect and store a share text posted in a message.
    Returns the number of records ingested from this message.
    """
    content = getattr(msg, "content", "") or ""
    try:
        record = await ingest_text(msg.author, content, msg.created_at, players, catalog)
    except ParseError as e:
        logger.debug("parse_result: msg id=%s looked like a share text but did not parse: %s",
                     getattr(msg, "id", None), e)
        return 0
    except Exception:
        logger.exception("parse_result: failed to ingest msg id=%s", getattr(msg, "id", None))
        return 0
    return 1 if record is not None else 0


# -----------------------------------------------------------------------------
# Catch up history
# -----------------------------------------------------------------------------
async def catchup(text_channel, players: Dict[int, Player], catalog: GameCatalog, dates: DatesConfig = DatesConfig()):
    logger.info("Catching up in channel/thread '%s'", getattr(text_channel, "name", str(text_channel)))
    total_messages = 0
    total_results = 0

    # oldest_first keeps each player's records in order, so streaks accumulate correctly
    async for msg in text_channel.history(limit=None, after=dates.min_datetime(), oldest_first=True):
        if getattr(getattr(msg, "author", None), "bot", False):
            continue
        total_messages += 1
        total_results += await parse_result(msg, players, catalog)

    logger.info("Catchup scanned %s messages, ingested %s results (players=%s)",
                total_messages, total_results, len(players))


# -----------------------------------------------------------------------------
# Streak summaries
# -----------------------------------------------------------------------------
def streak_lines(player: Player, catalog: GameCatalog, now: Optional[datetime] = None) -> List[str]:
    lines = []
    for game_id in player.played_game_ids():
        game = catalog.get(game_id)
        if game is None:
            continue
        view = display_streaks(player.get_last_record(game_id), game, now=now, tz=player.tz)
        risk = " ⚠️ at risk" if view.streak_at_risk else ""
        lines.append(
            f"{game.display_name}: 🔥 {view.playstreak} played • 🏆 {view.winstreak} won "
            f"(best {view.max_winstreak}){risk}"
        )
    return lines


def build_streaks_embed(players: Dict[int, Player], bot, catalog: GameCatalog,
                        now: Optional[datetime] = None) -> discord.Embed:
    embed = discord.Embed(
        title="Puzzle Streaks",
        description="Current play and win streaks per game",
        color=discord.Color.blurple(),
    )

    rows = sorted(players.items(), key=lambda kv: kv[1].total_games, reverse=True)
    for user_id, player in rows[:25]:
        lines = streak_lines(player, catalog, now)
        if not lines:
            continue
        member = bot.get_user(int(user_id)) if user_id is not None else None
        name = getattr(member, "display_name", None) or getattr(player.author, "display_name", None) or str(user_id)
        embed.add_field(name=name, value="\n".join(lines)[:1024], inline=False)

    if not embed.fields:
        embed.add_field(name="Streaks", value="No data available yet.", inline=False)
    return embed


async def print_streaks(text_channel, players: Dict[int, Player], bot, catalog: GameCatalog, send_results: bool = True):
    embed = build_streaks_embed(players, bot, catalog)

    if not send_results:
        # Pretty-print the embed to stdout instead of sending to Discord
        print("==== Streaks (DEBUG) ====")
        print(f"Title: {embed.title or ''}")
        if embed.description:
            print(f"Description: {embed.description}")
        for f in embed.fields:
            print(f"\n{f.name}\n{'-' * len(f.name or '')}\n{f.value}")
        print("==== End Streaks (DEBUG) ====")
        return

    await text_channel.send(embed=embed)


def describe_reset(game: Game, now: Optional[datetime] = None) -> str:
    frame = "your local time" if game.is_asynchronous else "UTC"
    return f"{game.display_name} resets at {game.reset_time} {frame} (in {format_time_until_reset(game, now)})"


def players_at_risk(players: Dict[int, Player], game: Game, now: Optional[datetime] = None) -> List[Player]:
    at_risk = []
    for player in players.values():
        view = display_streaks(player.get_last_record(game.game_id), game, now=now, tz=player.tz)
        if view.streak_at_risk and view.playstreak > 0:
            at_risk.append(player)
    return at_risk


async def remind_streaks_at_risk(text_channel, players: Dict[int, Player], game: Game):
    """Posted when a game resets: everyone who played yesterday but not yet today."""
    at_risk = players_at_risk(players, game)
    if not at_risk:
        logger.debug("remind_streaks_at_risk: nobody at risk for %s", game.game_id)
        return
    mentions = " ".join(getattr(p.author, "mention", f"<@{p.owner_id}>") for p in at_risk)
    await text_channel.send(f"A new {game.display_name} is out! Streaks at risk: {mentions}")
    logger.info("remind_streaks_at_risk: %s players reminded for %s", len(at_risk), game.game_id)
