from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path

from suitetree import __version__
from suitetree.config import Config, load_config, set_config
from suitetree.errors import SuitetreeException
from suitetree.loader import load_results
from suitetree.statistic import statistic_of
from suitetree.suites import SuitesReport
from suitetree.tree import Group, format_tree


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr; DEBUG when verbose, INFO otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _load_cli_config(args: argparse.Namespace) -> Config:
    config = load_config(
        config_file=getattr(args, "config", None),
        cli_overrides={"labels": getattr(args, "labels", None)},
    )
    set_config(config)
    return config


def _format_statistic(group: Group) -> str:
    stat = statistic_of(group)
    parts = [f"{stat.total} total"]
    for name in ("passed", "failed", "broken", "skipped", "unknown"):
        count = getattr(stat, name)
        if count:
            parts.append(f"{count} {name}")
    return "(" + ", ".join(parts) + ")"


def _cmd_generate(args: argparse.Namespace) -> int:
    config = _load_cli_config(args)
    records = load_results(Path(args.results_dir), strict=args.strict)
    out_dir = Path(args.out)

    data = SuitesReport(config).write(records, out_dir)

    print(f"Suites report: {len(records)} results, {data.widget.total} top-level suites")
    if data.prune_report.removed_count:
        print(f"  Pruned {data.prune_report.removed_count} duplicate suite(s)")
    print(f"  {out_dir / config.data_dir / config.json_file}")
    print(f"  {out_dir / config.data_dir / config.csv_file}")
    print(f"  {out_dir / config.widgets_dir / config.json_file}")
    return 0


def _cmd_tree(args: argparse.Namespace) -> int:
    config = _load_cli_config(args)
    records = load_results(Path(args.results_dir), strict=args.strict)
    data = SuitesReport(config).generate(records)
    print(format_tree(data.tree, stats=_format_statistic))
    return 0


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "results_dir",
        help="Directory containing *-result.json files",
    )
    p.add_argument(
        "--labels",
        help="Comma separated label names to group by (default: parentSuite,suite,subSuite)",
    )
    p.add_argument(
        "--config",
        help="Path to YAML config file",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Fail on the first invalid result file instead of skipping it",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="suitetree",
        description="Group test results into a suites tree, export and widget summary",
    )

    # Global flags
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging and full tracebacks on errors",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    sub = p.add_subparsers(dest="cmd", required=True)

    # generate - write report files
    p_gen = sub.add_parser(
        "generate",
        help="Write suites.json, suites.csv and the widget summary",
    )
    _add_common_args(p_gen)
    p_gen.add_argument(
        "--out",
        required=True,
        help="Report output directory",
    )
    p_gen.set_defaults(func=_cmd_generate)

    # tree - print the pruned tree
    p_tree = sub.add_parser(
        "tree",
        help="Print the suites tree with per-suite statistics",
    )
    _add_common_args(p_tree)
    p_tree.set_defaults(func=_cmd_tree)

    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    configure_logging(args.verbose)

    try:
        rc = args.func(args)
        raise SystemExit(rc)
    except SystemExit:
        raise
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        raise SystemExit(130)
    except SuitetreeException as e:
        print(str(e.error), file=sys.stderr)
        if args.verbose:
            traceback.print_exc()
        raise SystemExit(1)
    except Exception as e:
        if args.verbose:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
            print("Run with --verbose for full traceback", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
