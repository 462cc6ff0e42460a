"""
Demo showing how to poll the usage dashboard API.

Run this after starting the API:
    export DASHBOARD_API_KEY="your-key"
    python poll_dashboard.py
"""

import os
import time

from usage_dashboard import DashboardClient, DashboardPoller, QueryValidationError


def show(data: dict) -> None:
    """Print the headline numbers of one dashboard payload."""
    summary = data["summary"]
    print(
        f"requests={summary['totalRequests']} tokens={summary['totalTokens']:,} "
        f"cost=${summary['totalCost']:.4f} success={summary['successRate']:.1f}% "
        f"tps={summary['avgTps']:.1f}"
    )
    for row in data["byBrand"][:3]:
        print(f"  {row['brand']:<12} {row['tokens']:>12,} tokens")


if __name__ == "__main__":
    client = DashboardClient(
        endpoint=os.getenv("DASHBOARD_ENDPOINT", "http://localhost:8000"),
        api_key=os.getenv("DASHBOARD_API_KEY") or None,
    )

    # Queries are validated before anything is sent
    try:
        client.fetch({"from": "2026-01-10"})
    except QueryValidationError as e:
        print(f"Rejected locally: {e}\n")

    trends = client.trends({"range": "30d"})
    tokens = trends["tokens"]
    print(f"30d tokens trend: {'up' if tokens['isUp'] else 'down'} {tokens['percentage']:.1f}%\n")

    # Poll the 7d view, then switch to the 1d view; results for the old
    # query that arrive late are dropped
    poller = DashboardPoller(client, interval=5.0, on_data=show)
    poller.start()
    time.sleep(6)

    print("\nSwitching to the last 24 hours...")
    poller.set_query({"range": "1d"})
    time.sleep(6)

    poller.shutdown()
    client.close()
