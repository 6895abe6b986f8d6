"""
Provenance sidecars for Open-HLD exports.

Each DXF/STEP/STL artifact gets a ``<stem>.metadata.json`` next to it that
records the deployment state it was posed with, the configuration hash and
the git revision, so a template on the shop floor can be traced back to the
exact wing it was cut for. ``audit_artifacts`` is the CI side of the same
contract.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
import json
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import config
from config.wing_config import SurfaceKind


REQUIRED_FIELDS = (
    "artifact",
    "artifact_type",
    "generated_at",
    "revision",
    "config_hash",
    "contributor",
    "controls",
    "provenance",
)

ARTIFACT_SUFFIXES = (".dxf", ".step", ".stl")


def get_git_revision() -> str:
    """Short hash of HEAD, or ``unknown`` outside a checkout."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            check=True,
            capture_output=True,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return "unknown"
    return result.stdout.strip() or "unknown"


def sidecar_path(artifact_path: Path) -> Path:
    return artifact_path.parent / f"{artifact_path.stem}.metadata.json"


@dataclass
class ArtifactMetadata:
    """Provenance record written next to each export."""

    artifact: str
    artifact_type: str
    revision: str
    contributor: str
    controls: Dict[str, float]
    config_hash: str = field(default_factory=config.config_hash)
    generated_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    provenance: Dict[str, Any] = field(
        default_factory=lambda: {
            "toolchain": config.project_name,
            "version": config.version,
            "automated": True,
        }
    )


def write_artifact_metadata(
    artifact_path: Path,
    artifact_type: str,
    controls: Dict[str, float],
    contributor: Optional[str] = None,
    revision: Optional[str] = None,
) -> Path:
    """Persist metadata next to an exported artifact.

    Args:
        artifact_path: Path to the artifact being exported.
        artifact_type: DXF, STEP or STL.
        controls: Deployment values the artifact was posed with, keyed by surface kind.
        contributor: Optional contributor identifier (env var HLD_CONTRIBUTOR used if unset).
        revision: Git revision to pin; detected automatically if omitted.

    Returns:
        Path of the sidecar file.
    """
    metadata = ArtifactMetadata(
        artifact=artifact_path.name,
        artifact_type=artifact_type,
        revision=revision or get_git_revision(),
        contributor=contributor or os.environ.get("HLD_CONTRIBUTOR", "unknown"),
        controls=dict(controls),
    )
    out = sidecar_path(artifact_path)
    out.write_text(json.dumps(asdict(metadata), indent=2, sort_keys=True))
    return out


def sidecar_problems(artifact_path: Path) -> List[str]:
    """Reasons the sidecar of ``artifact_path`` is unusable; empty when it checks out."""
    metadata_path = sidecar_path(artifact_path)
    if not metadata_path.exists():
        return [f"Missing metadata for {artifact_path.name}"]
    try:
        payload = json.loads(metadata_path.read_text())
    except json.JSONDecodeError:
        return [f"Invalid JSON in {metadata_path.name}"]

    problems = [f"{artifact_path.name}: missing field '{name}'"
                for name in REQUIRED_FIELDS if name not in payload]
    problems += [f"{artifact_path.name}: empty field '{key}'"
                 for key in ("revision", "config_hash", "contributor")
                 if key in payload and not str(payload[key]).strip()]
    if payload.get("artifact", artifact_path.name) != artifact_path.name:
        problems.append(f"{artifact_path.name}: sidecar names {payload['artifact']}")

    known = {kind.value for kind in SurfaceKind}
    unknown = sorted(set(payload.get("controls") or {}) - known)
    if unknown:
        problems.append(f"{artifact_path.name}: unknown surfaces in controls {unknown}")
    return problems


def audit_artifacts(output_dir: Path) -> Dict[Path, List[str]]:
    """Sidecar problems for every exported artifact under ``output_dir``."""
    if not output_dir.exists():
        return {}
    return {
        path: sidecar_problems(path)
        for path in sorted(output_dir.rglob("*"))
        if path.is_file() and path.suffix.lower() in ARTIFACT_SUFFIXES
    }
