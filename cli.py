#!/usr/bin/env python3
import argparse

from accountaudit.orchestrator import run_once


def main():
    parser = argparse.ArgumentParser(description="Account audit CLI: find stray suffixed accounts in a directory snapshot")
    parser.add_argument("--config", required=True, help="Path to YAML config")
    parser.add_argument("--snapshot", dest="snapshot", type=str, help="Override source.path (JSON snapshot)")
    parser.add_argument("--suffix-pattern", dest="suffix_pattern", type=str, help="Regex with named groups 'base' and 'suffix'")
    parser.add_argument("--include-real", dest="include_real", action="store_true", help="Also report pairs reviewed with no action")
    parser.add_argument("--no-include-real", dest="include_real", action="store_false", help="Only report actionable pairs")
    parser.add_argument("--out-dir", dest="out_dir", type=str, help="Override output.dir")
    parser.set_defaults(include_real=None)
    args = parser.parse_args()

    overrides = {
        "snapshot": args.snapshot,
        "suffix_pattern": args.suffix_pattern,
        "include_real": args.include_real,
        "out_dir": args.out_dir,
    }

    run_once(args.config, overrides=overrides)


if __name__ == "__main__":
    main()
