from __future__ import annotations

import argparse
import sys
from pathlib import Path

from typefront import parse_source
from typefront.errors import ParseError
from typefront.testing import generate_corpus_files


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="generate_corpus", description="Write a deterministic corpus of Python modules")
    ap.add_argument("--seed", type=int, default=1)
    ap.add_argument("--count", type=int, default=200, help="Number of .py files to write")
    ap.add_argument("--out", default="tests/fixtures/python_corpus")
    args = ap.parse_args(argv)
    if args.count < 1:
        ap.error("--count must be positive")

    out_dir = Path(args.out).resolve() / f"seed_{args.seed}"
    out_dir.mkdir(parents=True, exist_ok=True)

    written = 0
    for rel, src in generate_corpus_files(seed=args.seed, count=args.count):
        # Every generated case must be accepted by the front-end before it lands on disk.
        try:
            parse_source(src, file=rel)
        except ParseError as e:
            print(f"generator produced invalid source: {e}", file=sys.stderr)
            return 1
        (out_dir / rel).write_text(src, encoding="utf-8")
        written += 1

    print(f"{out_dir}: {written} file(s)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
