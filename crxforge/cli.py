"""crxforge command-line interface.

Usage::

    crxforge create my-extension --directory ./projects
    crxforge validate ./my-extension
    crxforge validate ./my-extension/manifest.json --no-files
    crxforge templates
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from crxforge import __version__
from crxforge.config import Config
from crxforge.errors import ForgeError, format_error, get_exit_code
from crxforge.manifest.validator import ManifestValidator
from crxforge.scaffold import MANIFEST_FILE, CreateOptions, ProjectScaffolder
from crxforge.template.registry import TemplateRegistry
from crxforge.utils import (
    console,
    create_progress,
    load_json,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_validation_result,
    set_debug,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crxforge",
        description="Scaffold and validate Chrome Manifest V3 extensions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  crxforge create my-extension\n"
            "  crxforge create my-extension -d ./projects --author 'Jane Doe'\n"
            "  crxforge validate ./my-extension\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Show error context and debug output")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Create a new extension project")
    create.add_argument("name", help="Project name (lowercase, npm-style)")
    create.add_argument("--template", "-t", default=None, help="Template id (default: vanilla)")
    create.add_argument("--directory", "-d", default=None, help="Parent directory (default: .)")
    create.add_argument("--description", default="A Chrome extension", help="Extension description")
    create.add_argument("--author", default=None, help="Author name")
    create.add_argument(
        "--skip-validation", action="store_true", help="Do not validate the generated project"
    )

    validate = sub.add_parser("validate", help="Validate a manifest.json")
    validate.add_argument(
        "path", nargs="?", default=".", help="Project directory or manifest file (default: .)"
    )
    validate.add_argument(
        "--no-files", action="store_true", help="Only check the schema, not referenced files"
    )

    sub.add_parser("templates", help="List available templates")
    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _cmd_create(args: argparse.Namespace, config: Config) -> int:
    options = CreateOptions(
        template=args.template or config.default_template,
        directory=Path(args.directory) if args.directory else config.output_dir,
        description=args.description,
        author=args.author,
        check_files=not args.skip_validation,
    )
    scaffolder = ProjectScaffolder(registry=TemplateRegistry(config.resolved_templates_dir))

    with create_progress() as progress:
        progress.add_task(f"Creating {args.name} from template '{options.template}'...", total=None)
        result = await scaffolder.create(args.name, options)

    print_success(f"Created {args.name} at {result.project_path}")
    print_summary_table(
        {
            "Template": result.template_id,
            "Files": str(len(result.files)),
            "Manifest version": str(result.manifest.get("manifest_version")),
            "Version": str(result.manifest.get("version")),
        },
        title="Project",
    )
    print_info(f"Next: cd {result.project_path} && npm install")
    return 0


async def _cmd_validate(args: argparse.Namespace, config: Config) -> int:
    target = Path(args.path)
    manifest_path = target / MANIFEST_FILE if target.is_dir() else target
    project_root = manifest_path.parent

    try:
        manifest = load_json(manifest_path)
    except FileNotFoundError:
        print_error(f"Manifest not found: {manifest_path}")
        return 3
    except OSError as exc:
        print_error(f"Cannot read {manifest_path}: {exc}")
        return 3
    except json.JSONDecodeError as exc:
        print_error(f"{manifest_path} is not valid JSON: {exc}")
        return 2
    except UnicodeDecodeError as exc:
        print_error(f"{manifest_path} is not UTF-8 text: {exc}")
        return 2

    validator = ManifestValidator()
    if args.no_files or not config.check_files:
        result = validator.validate(manifest)
    else:
        result = await validator.validate_complete(manifest, project_root)

    print_validation_result(result, title=str(manifest_path))
    return 0 if result.valid else 2


def _cmd_templates(config: Config) -> int:
    registry = TemplateRegistry(config.resolved_templates_dir)
    templates = registry.list()
    if not templates:
        print_error(f"No templates found in {registry.templates_dir}")
        return 1
    print_summary_table({t.id: f"{t.name}: {t.description}" for t in templates}, title="Templates")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point for ``crxforge`` / ``python -m crxforge.cli``."""
    args = build_parser().parse_args(argv)
    config = Config.from_env()
    debug = args.debug or config.debug
    set_debug(debug)

    try:
        if args.command == "create":
            return asyncio.run(_cmd_create(args, config))
        if args.command == "validate":
            return asyncio.run(_cmd_validate(args, config))
        return _cmd_templates(config)
    except ForgeError as exc:
        print_error(format_error(exc) if debug else exc.message)
        errors = getattr(exc, "errors", None)
        if errors:
            for issue in errors:
                console.print(f"  [cyan]{issue.field}[/cyan]: {issue.message}")
        return get_exit_code(exc)


if __name__ == "__main__":
    sys.exit(main())
