"""Command line interface for PROSPECT."""
from __future__ import annotations

import argparse
import json
import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from prospect import JobContext, JobRunner, bootstrap, create_default_context, registry
from prospect.data import ProviderSchema, ProviderWriter, load_seed_providers
from prospect.errors import ConfigValidationError, DataUnavailableError
from prospect.pipeline import run_preview, run_ranking, run_reconciliation
from prospect.scoring.config import (
    DEFAULT_CONFIG,
    ScoringConfig,
    load_scoring_profile,
    ranking_weights_from_mapping,
    scoring_config_from_mapping,
)
from prospect.scoring.ranker import RankFilters
from prospect.settings import Settings

logger = logging.getLogger(__name__)


def load_environment() -> None:
    """Copy ``KEY=value`` lines from ``ENV_FILE`` or ``.env`` into the environment."""

    candidates = []
    if env_file := os.getenv("ENV_FILE"):
        candidates.append(Path(env_file))
    candidates.append(Path(".env"))

    for path in candidates:
        if not path.exists():
            continue
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, _, value = line.partition("=")
                os.environ.setdefault(key.strip(), value.strip().strip('"'))


def configure_logging() -> None:
    """Configure logging from YAML/INI files or fall back to basic configuration."""

    config_candidates = []
    if config_env := os.getenv("LOGGING_CONFIG"):
        config_candidates.append(Path(config_env))
    config_candidates.extend(
        Path(name) for name in ("logging.yaml", "logging.yml", "logging.ini")
    )

    for config_path in config_candidates:
        if not config_path.exists():
            continue
        suffix = config_path.suffix.lower()
        try:
            if suffix in {".ini", ".cfg"}:
                logging.config.fileConfig(config_path, disable_existing_loggers=False)
            else:
                with config_path.open("r", encoding="utf-8") as handle:
                    logging.config.dictConfig(yaml.safe_load(handle))
            return
        except (OSError, ValueError, TypeError, KeyError, yaml.YAMLError) as exc:
            print(
                f"Failed to load logging config {config_path}: {exc}. Falling back to basic logging.",
                file=sys.stderr,
            )
            break

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _emit(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _profile(args: argparse.Namespace, settings: Settings) -> ScoringConfig:
    path = getattr(args, "profile", None) or settings.scoring_profile
    return load_scoring_profile(Path(path)) if path else DEFAULT_CONFIG


def _overrides(pairs: List[str]) -> Dict[str, Dict[str, str]]:
    """Turn ``section.key=value`` pairs into a nested profile mapping."""

    sections: Dict[str, Dict[str, str]] = {}
    for pair in pairs:
        target, sep, value = pair.partition("=")
        section, dot, key = target.partition(".")
        if not sep or not dot or not key:
            raise ConfigValidationError(f"Expected section.key=value, got {pair!r}")
        sections.setdefault(section.strip(), {})[key.strip()] = value.strip()
    return sections


def _context(args: argparse.Namespace) -> JobContext:
    settings = Settings.load()
    return create_default_context(settings, profile=_profile(args, settings))


def command_run(args: argparse.Namespace) -> None:
    runner = JobRunner(registry)
    try:
        jobs = runner.resolve(args.jobs or None)
    except ValueError as exc:
        raise ConfigValidationError(str(exc)) from exc
    context = _context(args)
    logger.info(
        "Running jobs %s against %s with profile '%s'.",
        jobs,
        context.settings.sqlite_path,
        context.profile.name,
    )
    reports = runner.run(jobs, context)
    _emit({"run_id": context.run_id, "jobs": [report.name for report in reports]})


def command_jobs(_: argparse.Namespace) -> None:
    print("PROSPECT Registered Jobs:")
    for definition in registry:
        mode = "writes" if definition.writes else "read-only"
        print(f"- {definition.name}: {definition.description} [{mode}]")


def command_seed(args: argparse.Namespace) -> None:
    settings = Settings.load()
    settings.ensure_directories()
    records = load_seed_providers(Path(args.csv))
    ProviderSchema(settings.sqlite_path).ensure()
    count = ProviderWriter(settings.sqlite_path).sync(records)
    _emit({"seeded": count, "database": str(settings.sqlite_path)})


def command_reconcile(_: argparse.Namespace) -> None:
    settings = Settings.load()
    summary = run_reconciliation(sqlite_path=settings.sqlite_path)
    _emit(summary.to_payload())


def command_preview(args: argparse.Namespace) -> None:
    settings = Settings.load()
    config = _profile(args, settings)
    if args.overrides:
        config = scoring_config_from_mapping(_overrides(args.overrides), base=config)
    result = run_preview(sqlite_path=settings.sqlite_path, config=config)
    _emit(result.to_payload())


def command_rank(args: argparse.Namespace) -> None:
    settings = Settings.load()
    weights = _profile(args, settings).ranking_weights
    if args.weights:
        try:
            payload = json.loads(args.weights)
        except json.JSONDecodeError as exc:
            raise ConfigValidationError(f"--weights is not valid JSON: {exc}") from exc
        weights = ranking_weights_from_mapping(payload, base=weights)
    filters = RankFilters(state=args.state, min_score=args.min_score, con_only=args.con_only)
    report = run_ranking(
        sqlite_path=settings.sqlite_path,
        weights=weights,
        filters=filters,
        limit=args.limit if args.limit is not None else settings.rank_limit,
        pool=settings.rank_pool,
    )
    _emit(report.to_payload())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Score and tier hospice acquisition targets.")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    parser_run = subparsers.add_parser("run", help="Run registered jobs")
    parser_run.add_argument(
        "jobs",
        nargs="*",
        help="Optional ordered list of jobs to run instead of all registered jobs.",
    )
    parser_run.add_argument("--profile", help="YAML/JSON scoring profile for read-only jobs.")
    parser_run.set_defaults(func=command_run)

    parser_jobs = subparsers.add_parser("jobs", help="List registered jobs")
    parser_jobs.set_defaults(func=command_jobs)

    parser_seed = subparsers.add_parser("seed", help="Load providers from a CSV extract")
    parser_seed.add_argument("csv", help="Path to the provider CSV file.")
    parser_seed.set_defaults(func=command_seed)

    parser_reconcile = subparsers.add_parser(
        "reconcile", help="Assign default tiers to providers that have none"
    )
    parser_reconcile.set_defaults(func=command_reconcile)

    parser_preview = subparsers.add_parser(
        "preview", help="Preview tier counts under a hypothetical profile"
    )
    parser_preview.add_argument("--profile", help="YAML/JSON scoring profile.")
    parser_preview.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="SECTION.KEY=VALUE",
        help="Override one profile value, e.g. thresholds.adcMax=80.",
    )
    parser_preview.set_defaults(func=command_preview)

    parser_rank = subparsers.add_parser("rank", help="Rank providers by composite score")
    parser_rank.add_argument("--profile", help="YAML/JSON scoring profile.")
    parser_rank.add_argument("--weights", help="JSON object of ranking weights.")
    parser_rank.add_argument("--state", help="Only providers in this state.")
    parser_rank.add_argument("--min-score", type=float, help="Minimum composite score.")
    parser_rank.add_argument("--con-only", action="store_true", help="Only CON states.")
    parser_rank.add_argument("--limit", type=int, help="Maximum number of results.")
    parser_rank.set_defaults(func=command_rank)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_environment()
    configure_logging()
    bootstrap()
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except (ConfigValidationError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except DataUnavailableError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 3
    return 0


if __name__ == "__main__":  # pragma: no cover - entry point for CLI usage
    raise SystemExit(main())
