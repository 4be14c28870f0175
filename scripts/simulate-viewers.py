#!/usr/bin/env python3
"""
simulate-viewers.py: Push synthetic viewer counts to a running viewerwatch API.

Creates a demo group with a few channels (or reuses an existing group) and
posts a random-walk sample for every channel on each tick, so the dashboard,
charts and peaks have data without platform credentials.

Usage:
    python scripts/simulate-viewers.py
    python scripts/simulate-viewers.py --api-url http://localhost:8787 --channels 5
    python scripts/simulate-viewers.py --group-id <uuid> --ticks 30 --interval 2
"""

import argparse
import json
import random
import sys
import time
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen


# ANSI color codes
class C:
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RESET = "\033[0m"


def api_call(api_url: str, method: str, path: str, payload: dict | None = None) -> dict | list:
    """Send a JSON request and return the decoded body. Exits on failure."""
    url = f"{api_url.rstrip('/')}{path}"
    data = json.dumps(payload).encode("utf-8") if payload is not None else None
    req = Request(
        url,
        data=data,
        headers={"Content-Type": "application/json", "Accept": "application/json"},
        method=method,
    )

    try:
        with urlopen(req, timeout=10) as resp:
            return json.loads(resp.read().decode("utf-8"))
    except HTTPError as e:
        body = e.read().decode("utf-8", errors="replace")[:200]
        print(f"  {C.RED}{method} {path} failed: HTTP {e.code}{C.RESET} {C.DIM}{body}{C.RESET}")
        sys.exit(1)
    except URLError as e:
        print(f"  {C.RED}Connection error:{C.RESET} {e.reason}")
        sys.exit(1)


def ensure_channels(args: argparse.Namespace) -> list[dict]:
    """Return the channels to simulate, creating a demo group when needed."""
    if args.group_id:
        channels = api_call(args.api_url, "GET", f"/v1/groups/{args.group_id}/channels")
        if not channels:
            print(f"  {C.YELLOW}Group has no channels, nothing to simulate{C.RESET}")
            sys.exit(1)
        return channels

    group = api_call(args.api_url, "POST", "/v1/groups", {"name": "Simulated streams"})
    print(f"  {C.BOLD}Created group:{C.RESET} {C.CYAN}{group['id']}{C.RESET}")

    channels = []
    for i in range(args.channels):
        channel = api_call(
            args.api_url,
            "POST",
            f"/v1/groups/{group['id']}/channels",
            {"platform": "tiktok", "display_name": f"sim_streamer_{i + 1}"},
        )
        channels.append(channel)
    return channels


def next_viewers(current: int, is_live: bool) -> tuple[int, bool]:
    """Random walk with occasional stream starts and ends."""
    if not is_live:
        return (random.randint(20, 200), True) if random.random() < 0.2 else (0, False)
    if random.random() < 0.05:
        return 0, False
    return max(0, current + random.randint(-25, 40)), True


def main() -> None:
    parser = argparse.ArgumentParser(description="Push synthetic viewer samples")
    parser.add_argument(
        "--api-url",
        type=str,
        default="http://localhost:8787",
        help="API base URL (default: http://localhost:8787)",
    )
    parser.add_argument(
        "--group-id",
        type=str,
        default=None,
        help="Simulate the channels of an existing group instead of creating one",
    )
    parser.add_argument(
        "--channels",
        type=int,
        default=3,
        help="Number of demo channels to create (default: 3)",
    )
    parser.add_argument("--ticks", type=int, default=20, help="Rounds of samples (default: 20)")
    parser.add_argument(
        "--interval",
        type=float,
        default=5.0,
        help="Seconds between rounds (default: 5)",
    )
    args = parser.parse_args()

    print(f"\n{C.BOLD}viewerwatch Sample Simulator{C.RESET}")
    print(f"{C.DIM}{'=' * 60}{C.RESET}\n")
    print(f"  {C.BOLD}API URL:{C.RESET}   {args.api_url}")

    channels = ensure_channels(args)
    state = {c["id"]: (random.randint(50, 500), True) for c in channels}
    print(f"  {C.BOLD}Channels:{C.RESET}  {len(channels)}")
    print(f"  {C.BOLD}Ticks:{C.RESET}     {args.ticks} every {args.interval}s\n")

    for tick in range(1, args.ticks + 1):
        total = 0
        for channel in channels:
            viewers, is_live = next_viewers(*state[channel["id"]])
            state[channel["id"]] = (viewers, is_live)
            result = api_call(
                args.api_url,
                "POST",
                "/v1/samples",
                {"channel_id": channel["id"], "viewers_count": viewers, "is_live": is_live},
            )
            total += viewers
            if result["new_peak"]:
                print(
                    f"  {C.GREEN}New peak{C.RESET} {channel['display_name']}: "
                    f"{result['peak_viewers_count']}"
                )

        print(f"  {C.DIM}[{tick:>3}/{args.ticks}]{C.RESET} total viewers {C.CYAN}{total}{C.RESET}")
        if tick < args.ticks:
            time.sleep(args.interval)

    stats = api_call(args.api_url, "GET", "/v1/stats")
    print(f"\n{C.DIM}{'=' * 60}{C.RESET}")
    print(
        f"  {C.BOLD}Dashboard:{C.RESET} {stats['total_viewers']} viewers, "
        f"{stats['live_channel_count']}/{stats['total_channels']} channels live\n"
    )


if __name__ == "__main__":
    main()
