#!/usr/bin/env python
import argparse
import sys
from pathlib import Path

from quiz_bank.config import PUBLIC_DIR
from quiz_bank.question_sets import write_manifest


def main():
    parser = argparse.ArgumentParser(
        description="Write question-sets.json listing every *Questions.json file"
    )
    parser.add_argument(
        "--public-dir",
        default=PUBLIC_DIR,
        help="Directory holding the question set files (default: %(default)s)",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Manifest path (default: <public-dir>/question-sets.json)",
    )
    args = parser.parse_args()

    public = Path(args.public_dir).resolve()
    if not public.is_dir():
        print(f"Public directory not found at {public}")
        return 0

    try:
        out_path, sets = write_manifest(public, args.output)
    except OSError as e:
        print(f"Failed to generate question-sets.json: {e}", file=sys.stderr)
        return 1

    print(f"Generated {out_path} with {len(sets)} entries.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
