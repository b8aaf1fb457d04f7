#!/usr/bin/env python
"""Command line entry point for the commons release steps."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from commons_release.core.config import DEFAULT_SECRETS_PATH, Settings, load_settings_overrides
from commons_release.core.exceptions import BuildFailure, FilesystemError
from commons_release.core.logging import configure_logging, get_logger
from commons_release.core.models import Artifact
from commons_release.detachment import detach_distributions
from commons_release.host import EnvironmentDecrypter, load_server_settings
from commons_release.scm import default_manager
from commons_release.staging_cleanup import clean_staging

LOGGER = get_logger(__name__)
COMPOUND_EXTENSIONS = ("tar.gz", "tar.bz2", "tar.xz")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="commons-release", description=__doc__)
    parser.add_argument("--secrets", type=Path, default=DEFAULT_SECRETS_PATH, help="Secrets TOML file.")
    parser.add_argument("--log-level", choices=("DEBUG", "INFO", "WARNING", "ERROR"), help="Override log level.")
    parser.add_argument("--json-logs", action="store_true", help="Emit log events as JSON lines.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    detach = subparsers.add_parser("detach-distributions", help="Detach distribution archives from deployment.")
    detach.add_argument(
        "--artifact",
        action="append",
        default=[],
        metavar="PATH[:TYPE]",
        help="Attached artifact (repeatable). TYPE defaults to the file extension.",
    )
    detach.add_argument("--artifacts-file", type=Path, help="JSON list of {path, type, classifier} objects.")
    detach.add_argument("--build-directory", type=Path, help="Host build output directory.")
    detach.add_argument("--working-directory", type=Path, help="Directory receiving the detached copies.")

    clean = subparsers.add_parser("clean-staging", help="Remove everything from the SVN staging area.")
    clean.add_argument("--artifact-id", required=True, help="Artifact id named in the commit message.")
    clean.add_argument("--staging-url", help="scm:svn:https://... staging location.")
    clean.add_argument("--dist-module", action="store_true", default=None, help="Mark this module as a distribution module.")
    clean.add_argument("--dry-run", action="store_true", default=None, help="Check out and list the staged files, but do not remove or commit.")
    clean.add_argument("--dist-server", help="Server id from the secrets file used for credentials.")
    clean.add_argument("--username", help="SVN username.")
    clean.add_argument("--password", help="SVN password.")
    clean.add_argument("--build-directory", type=Path, help="Host build output directory.")
    clean.add_argument("--working-directory", type=Path, help="Plugin working directory.")
    clean.add_argument("--cleanup-directory", type=Path, help="Local checkout directory.")
    return parser


def parse_artifact(spec: str) -> Artifact:
    path_text, _, type_text = spec.rpartition(":")
    if not path_text or "/" in type_text or "\\" in type_text:
        path_text, type_text = spec, ""
    path = Path(path_text)
    return Artifact(path=path, type=type_text or artifact_type_for(path))


def artifact_type_for(path: Path) -> str:
    name = path.name.lower()
    for extension in COMPOUND_EXTENSIONS:
        if name.endswith(f".{extension}"):
            return extension
    return path.suffix.lstrip(".")


def load_artifacts_file(path: Path) -> list[Artifact]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise FilesystemError(f"Unable to read artifacts file {path}: {exc}", path) from exc
    except json.JSONDecodeError as exc:
        raise FilesystemError(f"Artifacts file is not valid JSON: {path}: {exc}", path) from exc
    if not isinstance(data, list):
        raise FilesystemError(f"Artifacts file must contain a JSON list: {path}", path)
    artifacts: list[Artifact] = []
    for index, entry in enumerate(data):
        if isinstance(entry, str):
            artifacts.append(parse_artifact(entry))
            continue
        if not isinstance(entry, dict) or not entry.get("path"):
            raise FilesystemError(f"Artifacts file entry {index} has no \"path\": {path}", path)
        artifact_path = Path(entry["path"])
        artifacts.append(
            Artifact(
                path=artifact_path,
                type=entry.get("type") or artifact_type_for(artifact_path),
                classifier=entry.get("classifier"),
            )
        )
    return artifacts


def build_settings(args: argparse.Namespace) -> Settings:
    overrides: dict[str, Any] = load_settings_overrides(args.secrets)
    cli_values = {
        "build_directory": getattr(args, "build_directory", None),
        "working_directory": getattr(args, "working_directory", None),
        "dist_cleanup_directory": getattr(args, "cleanup_directory", None),
        "dist_svn_staging_url": getattr(args, "staging_url", None),
        "is_dist_module": getattr(args, "dist_module", None),
        "dry_run": getattr(args, "dry_run", None),
        "dist_server": getattr(args, "dist_server", None),
        "username": getattr(args, "username", None),
        "password": getattr(args, "password", None),
        "log_level": args.log_level,
    }
    overrides.update({key: value for key, value in cli_values.items() if value is not None})
    return Settings(**overrides)


def _artifact_payload(artifact: Artifact) -> dict[str, Any]:
    return {"path": str(artifact.path), "type": artifact.type, "classifier": artifact.classifier}


def run_detach(args: argparse.Namespace, settings: Settings) -> dict[str, Any]:
    artifacts = [parse_artifact(spec) for spec in args.artifact]
    if args.artifacts_file:
        artifacts.extend(load_artifacts_file(args.artifacts_file))
    result = detach_distributions(artifacts, settings.detachment_config())
    return {
        "attached": [_artifact_payload(artifact) for artifact in result.attached],
        "detached": [_artifact_payload(artifact) for artifact in result.detached],
        "copied_files": [str(path) for path in result.copied_files],
    }


def run_clean(args: argparse.Namespace, settings: Settings) -> dict[str, Any]:
    outcome = clean_staging(
        args.artifact_id,
        settings.cleanup_config(),
        manager=default_manager(settings.svn_executable),
        servers=load_server_settings(args.secrets),
        decrypter=EnvironmentDecrypter(),
    )
    return {
        "state": outcome.state.value,
        "reason": outcome.reason,
        "removed_files": [str(path) for path in outcome.removed_files],
        "planned_files": [str(path) for path in outcome.planned_files],
        "revision": outcome.revision,
    }


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = build_settings(args)
    configure_logging(settings.log_level, json_logs=args.json_logs)

    handler = run_detach if args.command == "detach-distributions" else run_clean
    try:
        payload = handler(args, settings)
    except BuildFailure as exc:
        LOGGER.error("cli.build_failure", command=args.command, error=str(exc))
        print(f"BUILD FAILURE: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
