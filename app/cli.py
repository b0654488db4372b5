"""
Command-line interface for the phasor circuit solver.

Solve drawn circuit documents, validate them, inspect the built net and
compute port equivalents without the editor.

Usage::

    python -m cli solve circuit.json
    python -m cli solve circuit.json --freq 1000 --format csv --output results.csv
    python -m cli solve circuit.json --format text --steps
    python -m cli validate circuit.json
    python -m cli netlist circuit.json
    python -m cli port circuit.json n2 gnd --load R2
    python -m cli export circuit.json --format xlsx --output results.xlsx
    python -m cli batch circuits/ --output-dir results/
"""

import argparse
import glob
import json
import logging
import sys
from pathlib import Path

from controllers.file_controller import load_document
from controllers.simulation_controller import SimulationController
from models.circuit import CircuitDocument
from simulation.complex_value import format_complex
from simulation.csv_exporter import export_port_report, export_solve_results
from simulation.excel_exporter import export_port_to_excel, export_solve_to_excel
from simulation.mna_solver import phasor_summary
from simulation.power_calculator import power_balance
from simulation.settings import SolverSettings, load_settings


def try_load_document(filepath: str) -> tuple[CircuitDocument | None, str]:
    """Load and validate a document JSON file without exiting.

    Args:
        filepath: Path to the document JSON file.

    Returns:
        (doc, "") on success, or (None, error_message) on failure.
    """
    path = Path(filepath)
    if not path.exists():
        return None, f"file not found: {filepath}"

    try:
        return load_document(path), ""
    except ValueError as e:
        return None, f"invalid circuit file: {e}"
    except OSError as e:
        return None, f"cannot read {filepath}: {e}"


def load_or_exit(filepath: str) -> CircuitDocument:
    """Load and validate a document JSON file.

    Raises:
        SystemExit: On file read or validation errors.
    """
    doc, error = try_load_document(filepath)
    if doc is None:
        print(f"Error: {error}", file=sys.stderr)
        sys.exit(1)
    return doc


def _settings(args: argparse.Namespace) -> SolverSettings:
    try:
        return load_settings(args.settings)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error: invalid settings file {args.settings}: {e}", file=sys.stderr)
        sys.exit(1)


def _emit(text: str, output) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        print(f"Results written to {output}", file=sys.stderr)
    else:
        print(text)


def _print_failure(result) -> None:
    print(f"Solve failed: {result.error}", file=sys.stderr)
    for step in result.steps:
        print(f"  [{step.kind}] {step.title}", file=sys.stderr)


def cmd_solve(args: argparse.Namespace) -> int:
    """Solve the document and output results."""
    doc = load_or_exit(args.circuit)
    sim = SimulationController(doc, _settings(args))

    result = sim.solve(args.freq)
    if not result.success:
        _print_failure(result)
        return 1

    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    _emit(_format_solve(result.data, sim, args.format, Path(args.circuit).stem, args.steps), args.output)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a document without solving."""
    doc = load_or_exit(args.circuit)
    sim = SimulationController(doc, _settings(args))

    result = sim.validate()

    if result.success:
        print(f"Circuit is valid: {args.circuit}")
        for warning in result.warnings:
            print(f"  Warning: {warning}")
        return 0
    else:
        print(f"Circuit has errors: {args.circuit}", file=sys.stderr)
        for err in result.errors:
            print(f"  - {err}", file=sys.stderr)
        return 1


def cmd_netlist(args: argparse.Namespace) -> int:
    """Print the built net as JSON."""
    doc = load_or_exit(args.circuit)
    sim = SimulationController(doc, _settings(args))

    result = sim.build_net()
    if not result.success:
        print(f"Net build failed: {result.errors[0]}", file=sys.stderr)
        return 1

    _emit(json.dumps(result.data.to_dict(), indent=2, ensure_ascii=False), args.output)
    return 0


def cmd_port(args: argparse.Namespace) -> int:
    """Compute the Thevenin/Norton equivalent between two nodes."""
    doc = load_or_exit(args.circuit)
    sim = SimulationController(doc, _settings(args))

    result = sim.analyze_port(args.node_a, args.node_b, args.load, args.freq)
    if not result.success:
        print(f"Port analysis failed: {result.error}", file=sys.stderr)
        return 1

    report = result.data
    if args.format == "json":
        text = json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
    elif args.format == "csv":
        freq = doc.freq_hz if args.freq is None else args.freq
        text = export_port_report(report, freq, Path(args.circuit).stem)
    else:
        text = report.report_text()
    _emit(text, args.output)
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Solve and export results (or a port report) to a file."""
    doc = load_or_exit(args.circuit)
    sim = SimulationController(doc, _settings(args))
    name = Path(args.circuit).stem
    freq = doc.freq_hz if args.freq is None else args.freq

    if args.port:
        result = sim.analyze_port(args.port[0], args.port[1], args.load, freq)
        if not result.success:
            print(f"Port analysis failed: {result.error}", file=sys.stderr)
            return 1
        if args.format == "xlsx":
            export_port_to_excel(result.data, args.output, freq, name)
        else:
            Path(args.output).write_text(export_port_report(result.data, freq, name), encoding="utf-8")
    else:
        result = sim.solve(freq)
        if not result.success:
            _print_failure(result)
            return 1
        if args.format == "xlsx":
            export_solve_to_excel(result.data, args.output, sim.net, name)
        else:
            Path(args.output).write_text(export_solve_results(result.data, sim.net, name), encoding="utf-8")

    print(f"Exported to {args.output}", file=sys.stderr)
    return 0


def _format_solve(solved, sim, fmt: str, circuit_name: str = "", steps: bool = False) -> str:
    """Format a solve result as text."""
    if fmt == "csv":
        return export_solve_results(solved, sim.net, circuit_name)
    if fmt == "text":
        return _solve_to_text(solved, sim, steps)
    data = solved.to_dict()
    if not steps:
        data.pop("steps", None)
    return json.dumps(data, indent=2, ensure_ascii=False)


def _solve_to_text(solved, sim, steps: bool) -> str:
    digits = sim.settings.display_digits
    lines = []
    if steps:
        for step in solved.steps:
            lines.append(step.title)
            if step.note:
                lines.append(f"  {step.note}")
            lines.extend(f"  {line}" for line in step.lines)
            lines.append("")

    lines.append("Node voltages:")
    for node, v in solved.node_voltages.items():
        lines.append(f"  V({node}) = {format_complex(v, digits)} V   ({phasor_summary(v, digits)})")

    lines.append("Elements:")
    for element in sim.net.elements:
        if element.element_type == "GND":
            continue
        eid = element.element_id
        lines.append(
            f"  {element.name}: V = {format_complex(solved.element_voltages[eid], digits)} V, "
            f"I = {format_complex(solved.element_currents[eid], digits)} A, "
            f"S = {format_complex(solved.element_powers[eid], digits)} VA"
        )

    balance = power_balance(solved)
    lines.append(f"Power: absorbed {balance.absorbed:.6g} W, supplied {balance.supplied:.6g} W")
    return "\n".join(lines)


def cmd_batch(args: argparse.Namespace) -> int:
    """Solve multiple document files."""
    # Resolve input files
    pattern = args.path
    path = Path(pattern)
    if path.is_dir():
        files = sorted(path.glob("*.json"))
    elif "*" in pattern or "?" in pattern:
        files = sorted(Path(p) for p in glob.glob(pattern))
    else:
        print(f"Error: {pattern} is not a directory or glob pattern", file=sys.stderr)
        return 1

    if not files:
        print(f"No .json circuit files found matching: {pattern}", file=sys.stderr)
        return 1

    output_dir = None
    if args.output_dir:
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

    settings = _settings(args)
    results_summary = []
    any_failed = False

    for filepath in files:
        doc, error = try_load_document(str(filepath))
        if doc is None:
            results_summary.append({"file": filepath.name, "status": "LOAD_ERROR", "error": error})
            any_failed = True
            if args.fail_fast:
                break
            continue

        sim = SimulationController(doc, settings)
        result = sim.solve()
        if not result.success:
            results_summary.append({"file": filepath.name, "status": "FAIL", "error": result.errors[0]})
            any_failed = True
            if args.fail_fast:
                break
            continue

        results_summary.append(
            {"file": filepath.name, "status": "OK", "details": f"{len(sim.net.node_ids)} nodes @ {doc.freq_hz} Hz"}
        )

        if output_dir:
            ext = "csv" if args.format == "csv" else "json"
            out_path = output_dir / f"{filepath.stem}.{ext}"
            out_path.write_text(_format_solve(result.data, sim, args.format, filepath.stem), encoding="utf-8")

    # Print summary table
    print(f"\n{'File':<40} {'Status':<12} {'Details'}")
    print("-" * 70)
    for entry in results_summary:
        details = entry.get("details", entry.get("error", ""))
        print(f"{entry['file']:<40} {entry['status']:<12} {details}")

    total = len(results_summary)
    passed = sum(1 for e in results_summary if e["status"] == "OK")
    print(f"\n{passed}/{total} succeeded, {total - passed} failed")

    return 1 if any_failed else 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--settings", help="JSON file with solver settings")
    common.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    parser = argparse.ArgumentParser(
        prog="phasor-cli",
        description="Phasor circuit solver — solve, validate and analyse drawn circuits from the command line.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # solve
    solve_parser = subparsers.add_parser("solve", parents=[common], help="Solve and output results")
    solve_parser.add_argument("circuit", help="Path to circuit JSON file")
    solve_parser.add_argument("--freq", type=float, help="Override the document frequency (Hz)")
    solve_parser.add_argument(
        "--format", choices=["json", "csv", "text"], default="json", help="Output format (default: json)"
    )
    solve_parser.add_argument("--output", "-o", help="Write results to file instead of stdout")
    solve_parser.add_argument("--steps", action="store_true", help="Include the derivation steps")

    # validate
    val_parser = subparsers.add_parser("validate", parents=[common], help="Check circuit for errors without solving")
    val_parser.add_argument("circuit", help="Path to circuit JSON file")

    # netlist
    net_parser = subparsers.add_parser("netlist", parents=[common], help="Print the built net as JSON")
    net_parser.add_argument("circuit", help="Path to circuit JSON file")
    net_parser.add_argument("--output", "-o", help="Write output to file instead of stdout")

    # port
    port_parser = subparsers.add_parser("port", parents=[common], help="Thevenin/Norton equivalent between nodes")
    port_parser.add_argument("circuit", help="Path to circuit JSON file")
    port_parser.add_argument("node_a", help="Positive port node id (e.g. n2)")
    port_parser.add_argument("node_b", help="Negative port node id (e.g. gnd)")
    port_parser.add_argument("--load", help="Element id removed before analysis")
    port_parser.add_argument("--freq", type=float, help="Override the document frequency (Hz)")
    port_parser.add_argument(
        "--format", choices=["text", "json", "csv"], default="text", help="Output format (default: text)"
    )
    port_parser.add_argument("--output", "-o", help="Write output to file instead of stdout")

    # export
    exp_parser = subparsers.add_parser("export", parents=[common], help="Export results to xlsx or csv")
    exp_parser.add_argument("circuit", help="Path to circuit JSON file")
    exp_parser.add_argument("--format", "-f", choices=["xlsx", "csv"], default="xlsx", help="Export format")
    exp_parser.add_argument("--output", "-o", required=True, help="Output file path")
    exp_parser.add_argument("--freq", type=float, help="Override the document frequency (Hz)")
    exp_parser.add_argument("--port", nargs=2, metavar=("A", "B"), help="Export a port report instead")
    exp_parser.add_argument("--load", help="Load element id for --port")

    # batch
    batch_parser = subparsers.add_parser("batch", parents=[common], help="Solve multiple circuit files")
    batch_parser.add_argument("path", help="Directory or glob pattern matching circuit JSON files")
    batch_parser.add_argument(
        "--format", choices=["json", "csv"], default="json", help="Output format for per-file results (default: json)"
    )
    batch_parser.add_argument("--output-dir", help="Write per-file results to this directory")
    batch_parser.add_argument("--fail-fast", action="store_true", help="Stop on first error")

    return parser


def main(argv=None) -> int:
    """CLI entry point. Returns exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "solve": cmd_solve,
        "validate": cmd_validate,
        "netlist": cmd_netlist,
        "port": cmd_port,
        "export": cmd_export,
        "batch": cmd_batch,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
