from __future__ import annotations
import argparse
import logging
from random import Random
from build_markov import positive_int, read_lines
from markov import EmptyModelError, MarkovChain

log = logging.getLogger(__name__)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Generate new chat messages from a Markov chain over an input file.")
    ap.add_argument("input", nargs="?", help="Text file to build the chain from, one message per line")
    ap.add_argument("amount", nargs="?", type=positive_int, default=10, help="Number of messages to generate")
    ap.add_argument("--model", default=None, help="Load a model saved by build_markov.py instead of reading input")
    ap.add_argument("--order", type=positive_int, default=1, help="Markov chain order when building from input")
    ap.add_argument("--rng-seed", type=int, default=None)
    ap.add_argument("--verbose", action="store_true", help="Print non-critical information")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING, format="%(levelname)s: %(message)s")

    if args.model:
        if args.input is not None:
            # `generate.py --model m.json 5`: the lone positional is the amount
            if not args.input.isdigit():
                ap.error("pass either an input file or --model, not both")
            try:
                args.amount = positive_int(args.input)
            except argparse.ArgumentTypeError as e:
                ap.error(str(e))
        mc = MarkovChain.load(args.model)
        log.info("Loaded order %d model with %d contexts from %s", mc.order, len(mc), args.model)
    elif args.input:
        mc = MarkovChain(order=args.order)
        lines_read = mc.add_lines(read_lines([args.input]))
        log.info("Producing %d markov chains from %d lines of input", args.amount, lines_read)
    else:
        ap.error("an input file or --model is required")

    rng = Random(args.rng_seed)
    try:
        for _ in range(args.amount):
            print(mc.generate_str(rng))
    except EmptyModelError as e:
        raise SystemExit(f"Nothing to generate from: {e}")


if __name__ == "__main__":
    main()
