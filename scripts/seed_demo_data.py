#!/usr/bin/env python3
"""
Seed the logs table with synthetic demo data.

Usage:
    pip install -e .
    python seed_demo_data.py

Generates a year of realistic-looking LLM usage rows, including raw model
and provider names that the dashboard folds into canonical ones.
"""

import os
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from dotenv import load_dotenv
from supabase import create_client

from usage_dashboard.types import LogRecord

# Load from api/.env first (where Supabase secrets are stored)
api_env = Path(__file__).parent.parent / "api" / ".env"
if api_env.exists():
    load_dotenv(api_env)
else:
    load_dotenv()

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")
LOGS_TABLE = os.getenv("LOGS_TABLE", "logs")

# (provider, model, in_price, out_price, frequency); prices per 1M tokens
MODELS = [
    ("openai", "gpt-5-mini", 0.25, 2.00, 0.25),
    ("anthropic", "claude-sonnet-4-5", 3.00, 15.00, 0.15),
    ("opencode-claude", "claude-opus-4-6-thinking", 5.00, 25.00, 0.05),
    ("cloud", "zai-glm-4.6", 0.60, 2.20, 0.15),
    ("OpenRouter", "glm-4.7-free", 0.0, 0.0, 0.10),
    ("cloud", "gpt-oss-120b", 0.10, 0.50, 0.10),
    ("google", "gemini-2.5-flash", 0.30, 2.50, 0.10),
    ("OpenRouter", "deepseek/deepseek-chat", 0.27, 1.10, 0.10),
]

STATUSES = ["success"] * 19 + ["error"]


def generate_log(timestamp: datetime) -> dict:
    """Generate a single realistic log row."""
    provider, model, in_price, out_price, _ = random.choices(
        MODELS,
        weights=[m[4] for m in MODELS],
        k=1,
    )[0]

    prompt_tokens = random.randint(50, 4000)
    completion_tokens = random.randint(20, 1500)
    cost = (prompt_tokens * in_price / 1_000_000) + (completion_tokens * out_price / 1_000_000)

    # Latency correlates with output tokens
    latency = max(100, int(300 + completion_tokens * 12 + random.gauss(0, 200)))

    return LogRecord(
        provider=provider,
        model=model,
        status=random.choice(STATUSES),
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
        cost=round(cost, 6),
        latency=latency,
        timestamp=timestamp,
    ).to_dict()


def main():
    if not SUPABASE_URL or not SUPABASE_KEY:
        print("Error: Set SUPABASE_URL and SUPABASE_KEY in .env")
        return

    client = create_client(SUPABASE_URL, SUPABASE_KEY)

    now = datetime.now(timezone.utc)
    logs = []

    for days_ago in range(365, 0, -1):
        day_start = (now - timedelta(days=days_ago)).replace(hour=0, minute=0, second=0, microsecond=0)

        # Quiet weekends, busier recent months, some idle days
        if random.random() < 0.15:
            continue
        requests_per_day = random.randint(2, 10) + (365 - days_ago) // 30
        if day_start.weekday() >= 5:
            requests_per_day //= 3

        for _ in range(requests_per_day):
            timestamp = day_start + timedelta(
                hours=random.randint(8, 22),
                minutes=random.randint(0, 59),
                seconds=random.randint(0, 59),
            )
            logs.append(generate_log(timestamp))

    # Recent requests so the 1d view has hourly buckets
    for _ in range(25):
        timestamp = now - timedelta(minutes=random.randint(1, 23 * 60))
        logs.append(generate_log(timestamp))

    logs.sort(key=lambda x: x["timestamp"])

    print(f"Inserting {len(logs)} demo log rows into {LOGS_TABLE!r}...")

    batch_size = 500
    batches = (len(logs) + batch_size - 1) // batch_size
    for i in range(0, len(logs), batch_size):
        client.table(LOGS_TABLE).insert(logs[i:i + batch_size]).execute()
        print(f"  Inserted batch {i // batch_size + 1}/{batches}")

    total_cost = sum(log["cost"] for log in logs)
    total_tokens = sum(log["total_tokens"] for log in logs)

    print(f"\nSeeded {len(logs)} demo log rows")
    print(f"  Total cost: ${total_cost:.2f}")
    print(f"  Total tokens: {total_tokens:,}")
    print("\nView the dashboard at http://localhost:3000")


if __name__ == "__main__":
    main()
