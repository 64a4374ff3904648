# tests/helpers.py

from datetime import datetime, timezone
from types import SimpleNamespace

from puzzlelog.core.models import Game, GameRecord, StreakState


# One representative share text per grammar, keyed by grammar name.
SAMPLES = {
    "Wordle": "Wordle 1,643 4/6\n\n⬛🟨⬛⬛⬛\n⬛⬛🟩🟨⬛\n🟩🟩🟩🟩🟩",
    "Nerdle": "nerdlegame 812 3/6\n\n🟪⬛🟪⬛🟩⬛🟪⬛\n🟩🟩🟪🟩🟩🟪🟩🟩\n🟩🟩🟩🟩🟩🟩🟩🟩",
    "Bandle": "Bandle #1227 4/6\n⬛🟥🟥🟩⬜⬜\nhttps://bandle.app/",
    "Angle": "#Angle #912 3/4\n⬆️⬆️⬇️: 12°\n🎉🎉🎉\nhttps://www.angle.wtf",
    "Colorfle": "Colorfle 1010 3/6\n⬜🟨⬛\n🟩🟩🟩\nwith a color accuracy of 76.8%",
    "Worldle": "#Worldle #1052 (03.12.2024) 3/6 (100%)\n🟩🟩🟩🟨⬜↗️\n🟩🟩🟩🟩🟩🎉\n\nhttps://worldle.teuteuf.fr",
    "Quordle": "Daily Quordle 1012\n6️⃣4️⃣\n8️⃣5️⃣\nm-w.com/games/quordle/",
    "Genshindle": "I found today's #Genshindle in 2 tries!\n🟪🟩🟩🟩🟩🟩🟩\n🟥🟩🟥🟥🟩🟥🟩",
    "Gamedle": "🕹️ Gamedle (Cover art): #1337 🟥🟥🟥🟥🟥🟩",
    "Hexcodle": "I got Hexcodle #869 in 3! Score: 94%\n\n⏫⏬🔼🔽✅✅\n🔼✅✅✅🔽✅\n✅✅✅✅✅✅\n\nhexcodle.com",
    "Connections": "Connections\nPuzzle #512\n🟨🟨🟨🟨\n🟩🟦🟩🟩\n🟩🟩🟩🟩\n🟦🟦🟦🟦\n🟪🟪🟪🟪",
    "r34dle": "Rule34dle Daily 2025-01-14\n7/10\n🟩🟩🟥🟩🟩🟩🟥🟩🟩🟥",
    "Scrandle": "🟩🟥🟩🟩🟩🟩🟥🟩🟩🟩 8/10 | 2025-01-14 | https://scrandle.com",
    "Spellcheck": "Spellcheck #112\n🟩🟩🟥🟩🟩\n🟩🟥🟩🟩🟩\n🟩🟩🟩🟩🟥",
    "Pokedoku": "PokeDoku Summary 2025-01-14\nScore: 7/9\nUniqueness: 340/900\n✅✅🟥\n✅✅✅\n🟥✅✅",
    "Chronophoto": (
        "I got a score of 342 on today's Chronophoto: 12/25/2025\n"
        "Round 1: 0❌\nRound 2: 0❌\nRound 3: 0❌\nRound 4: 342\nRound 5: 0❌\n"
        "https://www.chronophoto.app/daily.html"
    ),
    "ColorGuesser": "ColorGuesser #88\n🎨🎨🎨\nScore: 412/500",
    "Timingle": "Timingle #301\n⏰ 🟩🟩🟨\nI was off by 2.4 seconds",
    "Wantedle": "WANTEDLE #204 - Hard\nB - 19.2s\n🤠",
    "LoLdle": (
        "I've completed all the modes of #LoLdle #1261 today:\n"
        "❓ Classic: 8\n💬 Quote: 5\n🔥 Ability: 1 🧠 ✓\n😀 Emoji: 4\n🎨 Splash: 1 ✓"
    ),
    "Pokedle": (
        "I've completed all the modes of #Pokedle #799 today:\n"
        "❓ Classic: 11\n🃏 Card: 14\n📄 Description: 4\n👤 Silhouette: 15"
    ),
}


def make_game(reset_time: str = "00:00", is_asynchronous: bool = False, game_id: str = "wordle") -> Game:
    return Game(game_id, game_id.title(), reset_time, is_asynchronous, {"puzzle1": {"attempts": 6}})


def utc(year, month, day, hour=12, minute=0, second=0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


def make_record(created_at, failed=False, playstreak=1, winstreak=1, max_winstreak=1,
                game_id="wordle") -> GameRecord:
    return GameRecord(
        owner_id=1,
        game_id=game_id,
        created_at=created_at,
        failed=failed,
        metadata=StreakState(playstreak, winstreak, max_winstreak),
    )


def make_author(uid: int = 1, name: str = "tim"):
    return SimpleNamespace(id=uid, name=name, display_name=name, mention=f"<@{uid}>", bot=False)
