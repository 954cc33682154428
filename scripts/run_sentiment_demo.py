"""
Demo script for the Token Sentiment Engine.

Runs two sample batches through a fresh engine and prints:
1. Per-token signals
2. Trending tokens
3. Strong-move alerts

Configuration is read from SENTIMENT_* environment variables
(a local .env file is loaded first).
"""

import logging
import sys
from datetime import datetime

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Add parent to path
sys.path.insert(0, ".")

from token_sentiment import EngineConfig, SentimentEngine, TextItem


def print_header(text: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {text}")
    print('='*60)


def first_batch() -> list[TextItem]:
    now = datetime.utcnow()
    return [
        TextItem(
            id="1",
            text="$SOL looking bullish af 🚀 breaking out of this channel, could moon soon",
            author="cryptotrader", author_followers=50_000,
            likes=500, reshares=100, replies=50, created_at=now,
        ),
        TextItem(
            id="2",
            text="Just aped into $BONK, this is the play. wagmi 🔥",
            author="degen123", author_followers=10_000,
            likes=200, reshares=50, replies=30, created_at=now,
        ),
        TextItem(
            id="3",
            text="$JUP looking like a scam tbh, devs dumping on retail. bearish 📉",
            author="skeptic_whale", author_followers=100_000,
            likes=1000, reshares=200, replies=150, created_at=now,
        ),
        TextItem(
            id="4",
            text="I don't think $SOL is bullish at all right now, not buying this pump",
            author="contrarian", author_followers=30_000,
            likes=80, reshares=10, replies=5, created_at=now,
        ),
    ]


def second_batch() -> list[TextItem]:
    now = datetime.utcnow()
    return [
        TextItem(
            id="5",
            text="SOL breakout confirmed, loading up 📈💎",
            author="chartwhiz", author_followers=80_000,
            likes=900, reshares=300, replies=60, created_at=now,
        ),
        TextItem(
            id="6",
            text="$BONK is dead, total rug. ngmi 💀",
            author="bearwatch", author_followers=5_000,
            likes=40, reshares=5, replies=12, created_at=now,
        ),
    ]


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = SentimentEngine(config=EngineConfig.from_env())

    for number, batch in enumerate((first_batch(), second_batch()), start=1):
        print_header(f"Batch {number}: {len(batch)} items")
        results = engine.process_batch(batch)
        for token, signal in sorted(results.items()):
            print(
                f"  {token:<8} score={signal.score:+4d} "
                f"confidence={signal.confidence:3d} volume={signal.volume} "
                f"momentum={signal.momentum:+.0f} "
                f"[{signal.category.value} / {signal.trading_signal.value}]"
            )

    print_header("Trending")
    for entry in engine.trending(limit=5):
        print(
            f"  {entry.symbol:<8} mentions={entry.mentions} "
            f"sentiment={entry.sentiment_score:+d} "
            f"change={entry.change_percent:+.1f}% trend={entry.trend_score:.2f}"
        )

    print_header("Alerts")
    alerts = engine.alerts()
    if not alerts:
        print("  (none)")
    for alert in alerts:
        print(f"  [{alert.severity.value.upper()}] {alert.message}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
