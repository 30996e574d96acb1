"""Network interface collector built on metricsampler.

Reads interface byte counters from /proc/net/dev (Linux) every few seconds
and prints one record per interface with per-second rates. Baselines are
kept in SQLite, so restarting the collector does not lose a cycle.

Run with:
    python examples/network_collector.py [samples.db]
"""

import json
import logging
import sys
import time
from pathlib import Path

from metricsampler import MetricError, MetricSet, SQLiteSampleCache, SourceType

logger = logging.getLogger("network_collector")

INTERVAL_SECONDS = 5


def read_counters(path: Path = Path("/proc/net/dev")) -> dict[str, tuple[int, int]]:
    """Return {interface: (rx_bytes, tx_bytes)}."""
    counters: dict[str, tuple[int, int]] = {}
    for line in path.read_text().splitlines()[2:]:
        interface, _, data = line.partition(":")
        fields = data.split()
        counters[interface.strip()] = (int(fields[0]), int(fields[8]))
    return counters


def collect(cache: SQLiteSampleCache) -> list[MetricSet]:
    records = []
    for interface, (rx, tx) in read_counters().items():
        ms = MetricSet("NetworkSample", entity_name=interface, cache=cache)
        errors = ms.set_metrics(
            [
                ("interfaceName", interface, SourceType.ATTRIBUTE),
                ("receiveBytesPerSecond", rx, SourceType.RATE),
                ("transmitBytesPerSecond", tx, SourceType.RATE),
                ("receiveBytes", rx, SourceType.DELTA),
            ]
        )
        if errors:
            logger.info("%s: %d metrics skipped this cycle", interface, len(errors))
        records.append(ms)
    return records


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    db_path = sys.argv[1] if len(sys.argv) > 1 else "samples.db"
    cache = SQLiteSampleCache(db_path)
    while True:
        try:
            for record in collect(cache):
                print(json.dumps(record.to_dict()))
        except (OSError, MetricError):
            logger.exception("Collection cycle failed")
        time.sleep(INTERVAL_SECONDS)


if __name__ == "__main__":
    main()
