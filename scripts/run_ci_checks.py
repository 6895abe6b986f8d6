"""CI entrypoint for Open-HLD.

Validates the configuration, checks that every catalog segment rests at
zero deployment and poses it at both ends of its range, and refuses
exported artifacts that lack a provenance sidecar.

Usage:
    python scripts/run_ci_checks.py [--output output]
"""
# ruff: noqa: E402
from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config import config, SurfaceKind
from highlift.kinematics import part_transforms, transform_for
from highlift.metadata import audit_artifacts
from highlift.surfaces import PlacementCatalog


def run_config_validation() -> int:
    errors = config.validate()
    if errors:
        print("Configuration validation failed:")
        for err in errors:
            print(f" - {err}")
        return 1

    print("Configuration validation passed.")
    return 0


def run_catalog_check() -> int:
    try:
        catalog = PlacementCatalog()
        n_segments = 0
        for kind in SurfaceKind:
            for segment in catalog.segments_for(kind):
                if not transform_for(kind, segment, 0.0).is_identity:
                    print(f"Stowed {kind.value} segment {segment.section_index}.{segment.index} is not at rest")
                    return 1
                for deployment in kind.deployment_range:
                    part_transforms(kind, segment, deployment)
                n_segments += 1
    except (ValueError, IndexError) as exc:
        print(f"Placement catalog check failed: {exc}")
        return 1

    print(f"Placement catalog check passed ({n_segments} segments).")
    return 0


def run_metadata_check(output_dir: Path) -> int:
    report = audit_artifacts(output_dir)
    if not report:
        print(f"No artifacts found under {output_dir}. Nothing to validate.")
        return 0

    failures = [problem for problems in report.values() for problem in problems]
    if failures:
        print("Metadata validation failed:")
        for failure in failures:
            print(f" - {failure}")
        return 1

    print(f"Validated metadata for {len(report)} artifact(s) in {output_dir}.")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Open-HLD CI checks")
    parser.add_argument("--output", type=Path, default=Path("output"),
                        help="Output directory to audit")
    args = parser.parse_args(argv)

    exit_codes = [
        run_config_validation(),
        run_catalog_check(),
        run_metadata_check(args.output),
    ]
    return 1 if any(code != 0 for code in exit_codes) else 0


if __name__ == "__main__":
    sys.exit(main())
