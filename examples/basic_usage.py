#!/usr/bin/env python3
"""
Basic Usage Example - FX signal scoring

This script runs the pattern analysis engine over a simulated hourly
EURUSD series. It shows how to:
- Configure structured logging
- Analyze a raw candle payload
- Place stop loss and take profit from the symbol's risk config
- Evaluate an open signal in pips

Run: python examples/basic_usage.py
"""

import json
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from fxsignal_app.engine import PatternAnalysisEngine
from fxsignal_app.instruments.pips import format_price
from fxsignal_app.logging import configure_logging
from fxsignal_app.monitoring.collector import MetricsCollector


def create_double_top_rows(start: datetime, count: int = 30) -> List[Dict[str, Any]]:
    """Create raw hourly rows with two matching highs near the end of the series."""
    rows = []
    for i in range(count):
        high = 1.1000
        if i in (count - 15, count - 8):
            high = 1.1050
        low = 1.0900 + i * 0.0001
        close = (high + low) / 2
        rows.append({
            "timestamp": int((start + timedelta(hours=i)).timestamp() * 1000),
            "open": close,
            "high": high,
            "low": low,
            "close": close,
            "volume": 1000,
        })
    return rows


def main() -> None:
    configure_logging(level="INFO")

    collector = MetricsCollector()
    engine = PatternAnalysisEngine(collector=collector)

    now = datetime(2024, 1, 3, 14, 0, tzinfo=timezone.utc)
    rows = create_double_top_rows(now - timedelta(hours=30))

    analysis = engine.analyze_payload("EUR/USD", rows, now=now)
    if analysis is None:
        print("Payload rejected")
        return

    print("=== Analysis ===")
    print(json.dumps(analysis.to_dict(), indent=2, default=str))

    candles = engine.normalizer.parse_candles(rows)
    entry = candles[-1].close

    levels = engine.plan_risk("EURUSD", entry, "SELL", candles)
    print(f"SELL @ {format_price(entry, 'EURUSD')} "
          f"SL {format_price(levels.stop_loss, 'EURUSD')} ({levels.stop_loss_pips} pips) "
          f"TP {format_price(levels.take_profit, 'EURUSD')} ({levels.take_profit_pips} pips)")
    print(f"Data stale: {engine.is_stale('EURUSD', candles[-1].ts, now=now)}")

    performance = engine.evaluate_signal(entry, entry - 0.0025, "SELL", "EURUSD")
    print(f"Performance: {performance.pips} pips ({performance.percentage:.3f}%)")

    print("=== Metrics ===")
    print(json.dumps(collector.snapshot(), indent=2))


if __name__ == "__main__":
    main()
