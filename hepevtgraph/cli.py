"""
Command-line interface for hepevtgraph.

Usage:
    hepevtgraph convert record.npz output.hepmc [--momentum-scaling 0.001]
    hepevtgraph info record.parquet
    hepevtgraph check record.parquet
    hepevtgraph doctor
"""

from __future__ import annotations

import argparse
import json
import sys

import hepevtgraph


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hepevtgraph",
        description="Rebuild particle/vertex event graphs from flat HEPEVT records.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {hepevtgraph.__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- convert ---
    convert_parser = subparsers.add_parser(
        "convert",
        help="Reconstruct event graphs and write them out",
        description="Read HEPEVT records (npz, Parquet) and write HepMC3 event graphs.",
    )
    convert_parser.add_argument("input", help="Input record file")
    convert_parser.add_argument("output", help="Output file path")
    convert_parser.add_argument(
        "--from", dest="input_format", default=None,
        help="Input format (auto-detected from extension if omitted)",
    )
    convert_parser.add_argument(
        "--to", dest="output_format", default=None,
        help="Output format (auto-detected from extension if omitted)",
    )
    convert_parser.add_argument(
        "--momentum-scaling", type=float, default=1.0,
        help="Factor applied to momenta and masses (default: 1)",
    )
    convert_parser.add_argument(
        "--length-scaling", type=float, default=1.0,
        help="Factor applied to vertex positions (default: 1)",
    )
    convert_parser.add_argument(
        "--momentum-unit", default="GEV",
        help="Momentum unit written to the output header (default: GEV)",
    )
    convert_parser.add_argument(
        "--length-unit", default="MM",
        help="Length unit written to the output header (default: MM)",
    )
    convert_parser.add_argument(
        "--keep-event-numbers", action="store_true",
        help="Use event numbers from the input instead of particle counts",
    )
    convert_parser.add_argument(
        "--max-events", type=int, default=-1,
        help="Maximum number of events to convert (-1 for all)",
    )
    convert_parser.add_argument(
        "--quiet", "-q", action="store_true",
        help="Suppress progress output",
    )

    # --- info ---
    info_parser = subparsers.add_parser(
        "info",
        help="Show information about a record file",
    )
    info_parser.add_argument("input", help="Input file path")
    info_parser.add_argument(
        "--format", dest="input_format", default=None,
        help="Input format (auto-detected if omitted)",
    )
    info_parser.add_argument(
        "--json", dest="as_json", action="store_true",
        help="Output as JSON",
    )

    # --- check ---
    check_parser = subparsers.add_parser(
        "check",
        help="Check records for shape and parent-range problems",
    )
    check_parser.add_argument("input", help="Input file path")
    check_parser.add_argument(
        "--format", dest="input_format", default=None,
        help="Input format (auto-detected if omitted)",
    )
    check_parser.add_argument(
        "--json", dest="as_json", action="store_true",
        help="Output as JSON",
    )

    # --- doctor ---
    doctor_parser = subparsers.add_parser(
        "doctor",
        help="Environment & capability check",
    )
    doctor_parser.add_argument("--json", dest="as_json", action="store_true")

    return parser


def _cmd_convert(args: argparse.Namespace) -> int:
    from .convert import convert

    try:
        convert(
            args.input,
            args.output,
            input_format=args.input_format,
            output_format=args.output_format,
            momentum_scaling=args.momentum_scaling,
            length_scaling=args.length_scaling,
            keep_event_numbers=args.keep_event_numbers,
            max_events=args.max_events,
            quiet=args.quiet,
            momentum_unit=args.momentum_unit,
            length_unit=args.length_unit,
        )
    except (ValueError, FileNotFoundError, ImportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def _cmd_info(args: argparse.Namespace) -> int:
    from .convert import info

    try:
        result = info(args.input, format=args.input_format)
    except (ValueError, FileNotFoundError, ImportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.as_json:
        print(json.dumps(result, indent=2))
    else:
        print(f"Format:              {result['format']}")
        print(f"Events:              {result['n_events']}")
        print(f"Total particles:     {result['total_particles']}")
        print(f"Total vertices:      {result['total_vertices']}")
        print(f"Beam particles:      {result['total_beam_particles']}")
        print(f"Avg particles/event: {result['avg_particles_per_event']:.1f}")

        if result['status_counts']:
            print(f"Status codes:        {result['status_counts']}")

        if result['top_particles']:
            print("Top particles:")
            for name, count in result['top_particles'][:10]:
                print(f"  {name:>20s}: {count}")

    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    from .convert import check

    try:
        report = check(args.input, format=args.input_format)
    except (ValueError, FileNotFoundError, ImportError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.as_json:
        print(json.dumps(report.to_dict(), indent=2, sort_keys=True))
    else:
        print(str(report))
    return 0 if report.is_valid else 2


def _cmd_doctor(args: argparse.Namespace) -> int:
    from .doctor import doctor_report

    rep = doctor_report()
    if args.as_json:
        print(json.dumps(rep, indent=2, sort_keys=True))
    else:
        print(rep["summary"])
        for item in rep["checks"]:
            status = "OK" if item["ok"] else "FAIL"
            print(f"- {status}: {item['name']}: {item['detail']}")
    return 0 if all(c["ok"] for c in rep["checks"]) else 2


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "convert": _cmd_convert,
        "info": _cmd_info,
        "check": _cmd_check,
        "doctor": _cmd_doctor,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    return handler(args)


if __name__ == "__main__":
    raise SystemExit(main())
