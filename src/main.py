# src/main.py — v3
"""CLI entry point — init, plan, apply commands.

Usage:
    instrctl init     discover documents, extract principles, detect conflicts
    instrctl plan     compute patches syncing each managed section
    instrctl apply    apply the plan and refresh state

Exit codes:
    0    success
    1    usage, configuration, git or I/O error
    2    blocking conflicts
    3    plan is stale (HEAD moved since `init`)
    4    a patch would touch lines outside a managed section
    130  interrupted
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from instrctl.config.settings import ConfigurationError, Settings, load_settings
from instrctl.discovery.scanner import DocumentReadError
from instrctl.logging.context import set_command_context
from instrctl.logging.logger import setup_logging
from instrctl.pipeline.applier import EXIT_BLOCKING, EXIT_PATCH_CONSTRAINT, PlanValidationError
from instrctl.pipeline.context import RepoContext
from instrctl.storage.store import ArtifactNotFoundError
from instrctl.vcs.git_client import GitCommandError
from instrctl.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = _load_settings(args)
    except (ConfigurationError, ValueError) as exc:
        print(f"instrctl: invalid configuration: {exc}", file=sys.stderr)
        return 1

    _setup_logging(settings, args.verbose)
    set_command_context(args.command)
    ctx = RepoContext.from_cwd(args.directory, settings)

    try:
        return asyncio.run(args.func(args, ctx))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except PlanValidationError as exc:
        logger.error("%s", exc)
        return exc.exit_code
    except ArtifactNotFoundError as exc:
        logger.error("%s", exc)
        return 1
    except GitCommandError as exc:
        logger.error("%s", exc)
        if exc.stderr.strip():
            print(exc.stderr.rstrip(), file=sys.stderr)
        return 1
    except (ConfigurationError, DocumentReadError) as exc:
        logger.error("%s", exc)
        return 1
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="instrctl",
        description=f"instrctl v{__version__} — manage instruction documents and keep them in sync",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "-C", dest="directory", type=Path, default=None, metavar="PATH",
        help="Run as if started in PATH (default: current directory)",
    )
    parser.add_argument(
        "--no-llm", action="store_true",
        help="Skip the LLM classifier and use heuristic extraction only",
    )

    subparsers = parser.add_subparsers(dest="command")

    p_init = subparsers.add_parser(
        "init", help="Discover instruction documents and generate state",
    )
    p_init.set_defaults(func=_cmd_init)

    p_plan = subparsers.add_parser(
        "plan", help="Compute a plan to align documents with desired principles",
    )
    p_plan.set_defaults(func=_cmd_plan)

    p_apply = subparsers.add_parser(
        "apply", help="Apply the previously generated plan",
    )
    p_apply.set_defaults(func=_cmd_apply)

    return parser


async def _cmd_init(args: argparse.Namespace, ctx: RepoContext) -> int:
    """Build and persist state, conflicts and the conflicts report."""
    from instrctl.extraction.classifier import build_classifier
    from instrctl.pipeline.state_builder import write_state_files

    result = await write_state_files(ctx, classifier=build_classifier(ctx.settings))
    conflicts = result.conflicts

    print(
        f"Found {len(result.state.documents)} documents and "
        f"{len(result.state.principles)} principles."
    )
    print(
        f"Conflicts written to .instrctl/conflicts.json "
        f"({len(conflicts.conflicts)} entries)."
    )
    if conflicts.has_blocking:
        blocking = [c.conflict_id for c in conflicts.conflicts if c.blocking]
        print(f"Blocking conflicts: {', '.join(blocking)} (see .instrctl/conflicts.md)")
        return EXIT_BLOCKING
    return 0


async def _cmd_plan(args: argparse.Namespace, ctx: RepoContext) -> int:
    """Compute plan.json from the current state."""
    from instrctl.pipeline.planner import build_plan

    plan = build_plan(ctx)
    print(f"Generated plan with {len(plan.file_patches)} file patches.")
    for patch in plan.file_patches:
        print(f"  {patch.path}")

    if plan.has_blocking:
        print("Plan carries blocking conflicts; resolve them before apply.")
        return EXIT_BLOCKING
    if not plan.validation.patch_constraints_ok:
        print("Plan modifies lines outside managed sections; refusing to proceed.")
        return EXIT_PATCH_CONSTRAINT
    return 0


async def _cmd_apply(args: argparse.Namespace, ctx: RepoContext) -> int:
    """Apply plan.json and refresh state."""
    from instrctl.extraction.classifier import build_classifier
    from instrctl.pipeline.applier import apply_plan

    def on_phase(phase: str, detail: str | None) -> None:
        logger.info("apply: %s%s", phase, f" {detail}" if detail else "")

    plan = await apply_plan(
        ctx, on_phase=on_phase, classifier=build_classifier(ctx.settings),
    )
    print(f"Applied {len(plan.file_patches)} patches.")
    return 0


def _load_settings(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.no_llm:
        overrides["llm_classifier_enabled"] = False
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    if args.directory is not None:
        overrides["_env_file"] = args.directory / ".env"
    return load_settings(**overrides)


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
