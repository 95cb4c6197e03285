# netprobe/stats.py
"""
Latency statistics for ping samples.

Rounding uses Python's built-in round() (round-half-to-even) for every
latency field and the loss percentage. Latencies are rounded to one decimal
so that min <= avg <= max still holds after rounding.
"""

from typing import Sequence

from .models import PingStats


def summarize_samples(samples: Sequence[float], sent: int) -> PingStats:
    """
    Aggregate successful round-trip samples (ms, in send order).

    `sent` is the number of attempts made, successful or not.
    """
    if sent < 1:
        raise ValueError(f"sent must be >= 1, got {sent}")
    if len(samples) > sent:
        raise ValueError(f"{len(samples)} samples for only {sent} packets sent")

    received = len(samples)
    if not samples:
        return PingStats(reachable=False, sent=sent, received=0, loss_pct=100)

    avg = round(sum(samples) / received, 1)
    if received >= 2:
        diffs = [abs(samples[i] - samples[i - 1]) for i in range(1, received)]
        jitter = round(sum(diffs) / len(diffs), 1)
    else:
        jitter = 0.0

    return PingStats(
        reachable=True,
        sent=sent,
        received=received,
        loss_pct=round((sent - received) / sent * 100),
        avg_ms=avg,
        # extremes rounded like avg on purpose, or min could exceed the rounded avg
        min_ms=round(min(samples), 1),
        max_ms=round(max(samples), 1),
        jitter_ms=jitter,
    )
