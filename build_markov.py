from __future__ import annotations
import argparse
import glob
import logging
import os
from typing import Iterator, List
from markov import MarkovChain

log = logging.getLogger(__name__)


def read_lines(paths: List[str]) -> Iterator[str]:
    """Yield every line of every readable file, one chat message per line."""
    for p in paths:
        try:
            with open(p, "r", encoding="utf-8", errors="ignore") as f:
                yield from f
        except OSError as e:
            log.warning("failed to read %s: %s", p, e)


def positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return n


def resolve_corpus(patterns: List[str]) -> List[str]:
    files = []
    for pattern in patterns:
        matches = glob.glob(pattern)
        if not matches:
            log.warning("no files match %s", pattern)
        files.extend(sorted(matches))
    return files


def main(argv=None):
    ap = argparse.ArgumentParser(description="Build and save a Markov model from chat message files.")
    ap.add_argument("--corpus", nargs="+", required=True, help="Paths/globs to plain-text files, one message per line")
    ap.add_argument("--order", type=positive_int, default=1, help="Markov chain order (words of context)")
    ap.add_argument("--out", required=True, help="Output model path (e.g., models/messages.json.gz)")
    ap.add_argument("--verbose", action="store_true", help="Print non-critical information")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING, format="%(levelname)s: %(message)s")

    files = resolve_corpus(args.corpus)
    if not files:
        raise SystemExit("No corpus files found. Provide --corpus paths/globs to .txt files.")

    mc = MarkovChain(order=args.order)
    lines_read = mc.add_lines(read_lines(files))
    log.info("Read %d lines from %d files", lines_read, len(files))

    os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
    mc.save(args.out)
    print(f"Saved Markov model: {args.out}")


if __name__ == "__main__":
    main()
