"""
cli.py - Command line entry point

Runs hydrostatic and stability calculations on a template hull or an
offsets CSV file and prints the results as JSON:

    hydrostab hydro --template wigley --draft 6.25
    hydrostab gz --csv offsets.csv --draft 4.0 --kg 5.2 --method FullImmersion
    hydrostab serve --template barge
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import argparse
import json
import logging
import sys

from hydrostab.bootstrap.config import HydroConfig, load_config
from hydrostab.bootstrap.logging_setup import configure_logging
from hydrostab.errors import HydroError, error_response
from hydrostab.geometry.csv_import import parse_offsets_csv
from hydrostab.geometry.models import HullGeometry, Loadcase
from hydrostab.geometry.providers import InMemoryGeometryProvider, InMemoryLoadcaseProvider
from hydrostab.geometry.templates import TEMPLATES, build_template
from hydrostab.service import HydrostaticsService
from hydrostab.stability.results import StabilityMethod, StabilityRequest

logger = logging.getLogger("hydrostab.cli")

VESSEL_ID = "cli"
LOADCASE_ID = "cli"


# =============================================================================
# PARSER
# =============================================================================

def _add_hull_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--template", choices=sorted(TEMPLATES), default="barge", help="Template hull")
    source.add_argument("--csv", help="Offsets CSV file")
    parser.add_argument("--length", type=float, help="Template length (m)")
    parser.add_argument("--beam", type=float, help="Template beam (m)")
    parser.add_argument("--design-draft", type=float, help="Template or CSV design draft (m)")
    parser.add_argument("--depth", type=float, help="Template or CSV depth (m)")
    parser.add_argument("--rho", type=float, help="Water density (kg/m³)")
    parser.add_argument("--kg", type=float, help="Vertical centre of gravity above keel (m)")
    parser.add_argument("--lcg", type=float, help="Longitudinal centre of gravity (m)")


def _add_angle_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--draft", type=float, help="Draft (m), defaults to design draft")
    parser.add_argument("--min-angle", type=float, default=0.0)
    parser.add_argument("--max-angle", type=float, default=90.0)
    parser.add_argument("--increment", type=float, default=1.0)
    parser.add_argument(
        "--method",
        choices=[m.value for m in StabilityMethod],
        default=StabilityMethod.WALL_SIDED.value,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="hydrostab Hydrostatics and Stability CLI",
        prog="hydrostab",
    )
    parser.add_argument("-c", "--config", help="Path to configuration file", default=None)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    hydro = sub.add_parser("hydro", help="Hydrostatics at one draft")
    _add_hull_arguments(hydro)
    hydro.add_argument("--draft", type=float, required=True)
    hydro.add_argument("--trim", type=float, default=0.0, help="Trim angle (deg), positive by the stern")

    table = sub.add_parser("table", help="Hydrostatic table over several drafts")
    _add_hull_arguments(table)
    table.add_argument("--drafts", type=float, nargs="+", required=True)

    curve = sub.add_parser("curve", help="Hydrostatic curves against draft")
    _add_hull_arguments(curve)
    curve.add_argument("--type", dest="curve_types", nargs="+", default=["displacement"])
    curve.add_argument("--min-draft", type=float, required=True)
    curve.add_argument("--max-draft", type=float, required=True)
    curve.add_argument("--points", type=int, default=None)

    bonjean = sub.add_parser("bonjean", help="Bonjean curves for every station")
    _add_hull_arguments(bonjean)

    gz = sub.add_parser("gz", help="GZ curve (requires --kg)")
    _add_hull_arguments(gz)
    _add_angle_arguments(gz)

    kn = sub.add_parser("kn", help="KN cross curve")
    _add_hull_arguments(kn)
    _add_angle_arguments(kn)

    criteria = sub.add_parser("criteria", help="GZ curve checked against IMO intact criteria (requires --kg)")
    _add_hull_arguments(criteria)
    _add_angle_arguments(criteria)

    trim = sub.add_parser("trim", help="Equilibrium draft and trim for a displacement")
    _add_hull_arguments(trim)
    trim.add_argument("--displacement", type=float, required=True, help="Target displacement (t)")

    validate = sub.add_parser("validate", help="Validate the hull offsets")
    _add_hull_arguments(validate)

    serve = sub.add_parser("serve", help="Run the REST API with the selected hull as vessel 'cli'")
    _add_hull_arguments(serve)
    serve.add_argument("-p", "--port", type=int, default=None)
    serve.add_argument("-H", "--host", default=None)

    return parser


# =============================================================================
# SETUP
# =============================================================================

def load_hull(args: argparse.Namespace) -> HullGeometry:
    """Hull from --csv or --template with any overridden dimensions."""
    if args.csv:
        particulars = {
            k: v for k, v in (("design_draft", args.design_draft), ("depth", args.depth)) if v is not None
        }
        with open(args.csv, newline="") as f:
            return parse_offsets_csv(f, name=args.csv, **particulars)

    params: Dict[str, Any] = {}
    if args.length is not None:
        params["length"] = args.length
    if args.beam is not None:
        params["beam"] = args.beam
    if args.depth is not None:
        params["depth"] = args.depth
    if args.design_draft is not None:
        params["design_draft" if args.template == "triangle" else "draft"] = args.design_draft
    return build_template(args.template, **params)


def build_service(args: argparse.Namespace, config: HydroConfig) -> HydrostaticsService:
    geometries = InMemoryGeometryProvider({VESSEL_ID: load_hull(args)})
    loadcase = Loadcase(
        rho=args.rho if args.rho is not None else config.compute.default_rho,
        kg=args.kg,
        lcg=args.lcg,
        name="command line",
    )
    loadcases = InMemoryLoadcaseProvider({LOADCASE_ID: loadcase})
    return HydrostaticsService(geometries, loadcases, config.compute)


def _stability_request(args: argparse.Namespace) -> StabilityRequest:
    return StabilityRequest(
        loadcase_id=LOADCASE_ID,
        min_angle=args.min_angle,
        max_angle=args.max_angle,
        angle_increment=args.increment,
        method=args.method,
        draft=args.draft,
    )


# =============================================================================
# COMMANDS
# =============================================================================

def run_command(args: argparse.Namespace, service: HydrostaticsService) -> Dict[str, Any]:
    """Execute one subcommand and return its JSON-serializable output."""
    command = args.command

    if command == "hydro":
        return service.compute_at_draft(VESSEL_ID, args.draft, LOADCASE_ID, args.trim).to_dict()

    if command == "table":
        results = service.compute_table(VESSEL_ID, args.drafts, LOADCASE_ID)
        return {"results": [r.to_dict() for r in results]}

    if command == "curve":
        curves = service.generate_curves(
            VESSEL_ID, args.curve_types, args.min_draft, args.max_draft, args.points, LOADCASE_ID
        )
        return {"curves": [c.to_dict() for c in curves.values()]}

    if command == "bonjean":
        return {"curves": [c.to_dict() for c in service.generate_bonjean_curves(VESSEL_ID)]}

    if command == "gz":
        return service.compute_gz_curve(VESSEL_ID, _stability_request(args)).to_dict()

    if command == "kn":
        return service.compute_kn_curve(VESSEL_ID, _stability_request(args)).to_dict()

    if command == "criteria":
        curve = service.compute_gz_curve(VESSEL_ID, _stability_request(args))
        return {"curve": curve.to_dict(), "criteria": service.check_criteria(curve).to_dict()}

    if command == "trim":
        return service.solve_trim(VESSEL_ID, args.displacement, LOADCASE_ID).to_dict()

    if command == "validate":
        return service.validate_geometry(VESSEL_ID).to_dict()

    raise ValueError(f"Unknown command: {command}")


def serve(service: HydrostaticsService, config: HydroConfig, args: argparse.Namespace) -> int:
    """Run the API server."""
    import uvicorn

    from hydrostab.deployment.api import create_app

    if args.port:
        config.api.port = args.port
    if args.host:
        config.api.host = args.host

    app = create_app(service, config)
    uvicorn.run(app, host=config.api.host, port=config.api.port)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Args:
        argv: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code: 0 on success, 1 on a calculation error, 2 on bad usage
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    config.logging.level = args.log_level
    configure_logging(config.logging)

    try:
        service = build_service(args, config)
        if args.command == "serve":
            return serve(service, config, args)
        output = run_command(args, service)
    except HydroError as e:
        logger.error(f"{args.command} failed: {e}")
        print(json.dumps(error_response(e), indent=2), file=sys.stderr)
        return 1
    except OSError as e:
        logger.error(f"Could not read input: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
