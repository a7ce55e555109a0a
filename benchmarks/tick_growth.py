"""Polyrhythm tick-grid growth benchmark.

Builds polyrhythms from increasingly awkward ratios and reports how large the
shared tick grid gets and how long combining takes. Useful for choosing a
``max_ticks`` ceiling.

Usage:
    python benchmarks/tick_growth.py [--ratio RATIO ...] [--repeats N] [--max-ticks N]

Options:
    --ratio RATIO       Ratio to build, e.g. 7:11:13 (repeatable; default: a built-in ladder)
    --repeats N         Timed builds per ratio (default: 5)
    --max-ticks N       Tick ceiling passed to the builder (default: 2**20)
"""

import argparse
import logging
import math
import statistics
import time
import typing

# Suppress library logging during benchmark; we want clean output.
logging.basicConfig(level=logging.ERROR)

import cacophony.polyrhythm
import cacophony.rhythm

# ---------------------------------------------------------------------------

DEFAULT_RATIOS = ["2:3", "4:3", "3:4:5", "5:7", "7:11", "7:11:13", "11:13:17", "13:17:19:23"]


def _grid_length (ratio: str) -> int:

	"""Shared tick count for an even-beat ratio, without building anything."""

	counts = [int(part) for part in ratio.split(":")]
	primary = counts[0]

	# Each component stretched to the primary's length has beats of primary/count.
	return math.lcm(*(count // math.gcd(count, primary) for count in counts)) * primary


def _run_benchmark (ratio: str, repeats: int, max_ticks: int) -> typing.Tuple[typing.List[float], int]:

	"""Build *ratio* *repeats* times and return (seconds per build, beats in the result)."""

	timings: typing.List[float] = []
	beats = 0

	for _ in range(repeats):
		started = time.perf_counter()
		rhythm = cacophony.polyrhythm.polyrhythm_from_ratio(ratio, max_ticks=max_ticks)
		timings.append(time.perf_counter() - started)
		beats = len(rhythm)

	return timings, beats


def _print_report (results: typing.List[typing.Tuple[str, int, typing.Optional[typing.List[float]], int]]) -> None:

	print(f"\nPolyrhythm Tick Growth Benchmark")
	print(f"{'─' * 62}")
	print(f"  {'Ratio':<14}{'Ticks':>10}{'Beats':>8}{'Median':>14}{'Max':>14}")
	print(f"{'─' * 62}")

	for ratio, ticks, timings, beats in results:

		if timings is None:
			print(f"  {ratio:<14}{ticks:>10}{'-':>8}{'over limit':>14}{'':>14}")
			continue

		median_ms = statistics.median(timings) * 1000
		max_ms = max(timings) * 1000

		print(f"  {ratio:<14}{ticks:>10}{beats:>8}{median_ms:>11.3f} ms{max_ms:>11.3f} ms")

	print(f"{'─' * 62}")
	print()


def main () -> None:

	parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
	parser.add_argument("--ratio",     action="append", default=None, help="Ratio to build (repeatable)")
	parser.add_argument("--repeats",   type=int, default=5,           help="Timed builds per ratio (default: 5)")
	parser.add_argument("--max-ticks", type=int, default=cacophony.rhythm.DEFAULT_MAX_TICKS, help="Tick ceiling (default: 2**20)")
	args = parser.parse_args()

	results = []

	for ratio in args.ratio or DEFAULT_RATIOS:

		ticks = _grid_length(ratio)

		try:
			timings, beats = _run_benchmark(ratio, args.repeats, args.max_ticks)
		except cacophony.rhythm.TickLimitError:
			results.append((ratio, ticks, None, 0))
			continue

		results.append((ratio, ticks, timings, beats))

	_print_report(results)


if __name__ == "__main__":
	main()
