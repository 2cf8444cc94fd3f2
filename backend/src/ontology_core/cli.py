"""Command line entry point: validate, export and describe ontology bundles.

Usage:
    python -m ontology_core validate --bundle ontology.yaml --tenant acme
    python -m ontology_core export --bundle ontology.yaml --tenant acme --format turtle
    python -m ontology_core context --tenant acme --channel prod
"""

import argparse
import asyncio
import json
import sys
from typing import Optional, Sequence

import structlog

from .bundle import bundle_to_repository, load_bundle
from .config import Settings, get_settings
from .curie import CurieRegistry
from .errors import AppError
from .export import export_jsonld_string, export_turtle
from .jsonld import build_jsonld_context_json
from .logging_config import configure_logging
from .publishing import decide, to_status
from .scope import TenantScope
from .store import OntologyStore
from .validation import OntologyValidator

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def _add_scope_arguments(parser: argparse.ArgumentParser, settings: Settings) -> None:
    parser.add_argument(
        "--tenant",
        default=settings.default_tenant_id,
        required=settings.default_tenant_id is None,
        help="Tenant identifier (default: ONTOLOGY_TENANT_ID)",
    )
    parser.add_argument(
        "--package",
        default=settings.default_package,
        help=f"Ontology package (default: {settings.default_package})",
    )
    parser.add_argument(
        "--channel",
        default=settings.default_channel,
        help=f"Release channel (default: {settings.default_channel})",
    )


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ontology_core",
        description="Validate and export tenant-scoped ontologies",
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    validate = subcommands.add_parser("validate", help="Validate an ontology bundle")
    validate.add_argument("--bundle", required=True, help="Path to a JSON or YAML bundle")
    _add_scope_arguments(validate, settings)
    validate.add_argument("--json", action="store_true", help="Print the report as JSON")
    validate.add_argument(
        "--gates",
        action="store_true",
        help="Also print the suggested publication status of each entity",
    )

    export = subcommands.add_parser("export", help="Export an ontology bundle")
    export.add_argument("--bundle", required=True, help="Path to a JSON or YAML bundle")
    _add_scope_arguments(export, settings)
    export.add_argument(
        "--format",
        choices=("jsonld", "turtle"),
        default="jsonld",
        help="Output format (default: jsonld)",
    )

    context = subcommands.add_parser("context", help="Print the JSON-LD @context")
    _add_scope_arguments(context, settings)

    return parser


async def _load_store(bundle_path: str, scope: TenantScope, settings: Settings) -> OntologyStore:
    bundle = load_bundle(bundle_path)
    curies = CurieRegistry(ldm_namespace=scope.base_namespace(settings.base_namespace_template))
    repository = await bundle_to_repository(bundle, scope, curies)
    return await OntologyStore.load(repository, scope)


def _run_validate(args: argparse.Namespace, scope: TenantScope, settings: Settings) -> int:
    store = asyncio.run(_load_store(args.bundle, scope, settings))
    result = OntologyValidator.validate(store, scope)

    gates = {}
    if args.gates:
        gates = {
            entity.local_name: to_status(decide(entity, settings.publish_gates)).value
            for entity in store.list_entities(scope)
        }

    if args.json:
        report = result.to_dict()
        if args.gates:
            report["gates"] = gates
        print(json.dumps(report, indent=2))
    else:
        for message in result.errors:
            print(message)
        for name, status in gates.items():
            print(f"{name}: {status}")
        print(f"{len(result.errors)} error(s) in {scope}")

    return EXIT_OK if result.is_valid else EXIT_INVALID


def _run_export(args: argparse.Namespace, scope: TenantScope, settings: Settings) -> int:
    store = asyncio.run(_load_store(args.bundle, scope, settings))
    namespace = scope.base_namespace(settings.base_namespace_template)
    if args.format == "turtle":
        sys.stdout.write(export_turtle(store, scope, namespace))
    else:
        print(export_jsonld_string(store, scope, namespace))
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI and return the process exit code.

    Exit codes: 0 success, 1 validation errors found, 2 bad input.
    """
    try:
        settings = get_settings()
    except ValueError as exc:
        # Logging is configured from settings, so report on stderr only.
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return EXIT_ERROR
    configure_logging(settings.log_level, settings.log_json)
    args = build_parser(settings).parse_args(argv)

    try:
        scope = TenantScope(args.tenant, args.package, args.channel)
        if args.command == "validate":
            return _run_validate(args, scope, settings)
        if args.command == "export":
            return _run_export(args, scope, settings)
        print(
            build_jsonld_context_json(
                scope, scope.base_namespace(settings.base_namespace_template)
            )
        )
        return EXIT_OK
    except AppError as exc:
        logger.error("ontology_cli_failed", command=args.command, code=exc.code.value)
        print(exc.message, file=sys.stderr)
        return EXIT_ERROR
