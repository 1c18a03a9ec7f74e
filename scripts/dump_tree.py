from __future__ import annotations

import argparse
import sys

from typefront import load_file
from typefront.dump import dump_json
from typefront.errors import Diagnostic
from typefront.format import format_statements


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="dump_tree")
    ap.add_argument("path")
    ap.add_argument("--format", dest="reformat", action="store_true", help="Print formatted source instead")
    args = ap.parse_args(argv)

    try:
        stmts = load_file(args.path)
        text = format_statements(stmts) if args.reformat else dump_json(stmts) + "\n"
    except Diagnostic as e:
        print(str(e), file=sys.stderr)
        return 1
    print(text, end="")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
