#!/usr/bin/env python3
"""
Open-HLD: Main Entry Point
==========================

Usage:
    python main.py --summary                       Show configuration summary
    python main.py --validate                      Validate configuration and catalog
    python main.py --table flaps --deployment 0.5  Print per-segment transforms
    python main.py --preset landing --export-step output/STEP
    python main.py --export-tracks output/DXF      Write slat/flap track templates
    python main.py --animate both                  Interactive side-view preview

"""

import argparse
import logging
import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config import config, SurfaceKind  # noqa: E402
from highlift.controls import ControlState, FlightPreset, apply_preset  # noqa: E402
from highlift.kinematics import part_transforms  # noqa: E402
from highlift.oscillator import AnimationTarget  # noqa: E402
from highlift.surfaces import PlacementCatalog  # noqa: E402


def validate_config() -> bool:
    """Validate configuration and build the placement catalog."""
    print("Validating configuration...")
    errors = config.validate()

    if errors:
        print("\nCONFIGURATION ERRORS:")
        for err in errors:
            print(f"  [!] {err}")
        return False

    try:
        catalog = PlacementCatalog()
    except ValueError as exc:
        print(f"  [!] Placement catalog rejected: {exc}")
        return False

    for kind in SurfaceKind:
        sections = catalog.sections_for(kind)
        n_segments = sum(s.segment_count for s in sections)
        print(f"  {kind.value:<9} {len(sections)} sections, {n_segments} segments")
    print("  Configuration valid.")
    return True


def print_table(kind: SurfaceKind, deployment: float) -> None:
    """Per-segment transforms for one surface kind."""
    catalog = PlacementCatalog()
    print(f"\n--- {kind.value.capitalize()} at deployment {deployment:+.2f} ---")
    print(f"  {'sec':>3} {'seg':>3} {'span':>7} {'chord':>6}  {'part':<11} "
          f"{'dx':>8} {'dy':>8} {'rot deg':>8}")
    for segment in catalog.segments_for(kind):
        for part, tf in part_transforms(kind, segment, deployment).items():
            dx, dy, _ = tf.translation
            print(
                f"  {segment.section_index:>3} {segment.index:>3} {segment.span_center:>7.3f} "
                f"{segment.chord_at_span:>6.3f}  {part:<11} {dx:>8.4f} {dy:>8.4f} {tf.rotation_deg:>8.2f}"
            )


def export_tracks(out_dir: Path, controls: ControlState) -> None:
    from highlift.export import export_track_dxf

    print("\n--- Exporting Track Templates ---")
    dxf_file = export_track_dxf(out_dir, controls=controls)
    print(f"  Track templates written to {dxf_file}")


def export_step(out_dir: Path, controls: ControlState) -> None:
    from highlift.export import export_scene

    print("\n--- Exporting Deployed Assembly ---")
    step_file = export_scene(out_dir, controls, export_type="STEP")
    print(f"  STEP written to {step_file}")


def animate(target: AnimationTarget, controls: ControlState, save: str = None) -> None:
    from highlift.oscillator import AutoDeployOscillator
    from highlift.preview import DeploymentPreview

    oscillator = AutoDeployOscillator(slat_value=controls.slats, flap_value=controls.flaps)
    preview = DeploymentPreview(oscillator=oscillator, controls=controls)
    if save:
        preview.save(save, target=target)
        print(f"  Animation saved to {save}")
    else:
        preview.show(target=target)


def main():
    parser = argparse.ArgumentParser(description="Open-HLD deployment kinematics")
    parser.add_argument("--summary", action="store_true", help="Show configuration summary")
    parser.add_argument(
        "--validate", action="store_true", help="Validate configuration only"
    )
    parser.add_argument(
        "--table",
        choices=[k.value for k in SurfaceKind],
        help="Print per-segment transforms for a surface kind",
    )
    parser.add_argument(
        "--deployment", type=float, default=None,
        help="Deployment for --table (defaults to the preset value)",
    )
    parser.add_argument(
        "--preset",
        choices=[p.value for p in FlightPreset],
        default=FlightPreset.CRUISE.value,
        help="Control preset used for exports and the preview",
    )
    parser.add_argument("--export-tracks", type=Path, metavar="DIR", help="Write track DXF")
    parser.add_argument("--export-step", type=Path, metavar="DIR", help="Write posed STEP")
    parser.add_argument(
        "--animate",
        choices=[t.value for t in AnimationTarget],
        help="Side-view preview driven by the auto-deployment oscillator",
    )
    parser.add_argument("--save", metavar="FILE", help="Save --animate to .gif/.mp4 instead of showing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    if len(sys.argv) == 1:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print(f"Open-HLD v{config.version} [{config.baseline}]")

    if args.summary:
        print(config.summary())
        return 0

    if args.validate:
        return 0 if validate_config() else 1

    if not validate_config():
        print("\nAborting due to configuration errors.")
        return 1

    controls = apply_preset(FlightPreset(args.preset))

    try:
        if args.table:
            kind = SurfaceKind(args.table)
            deployment = args.deployment if args.deployment is not None else controls.value(kind)
            print_table(kind, deployment)

        if args.export_tracks:
            export_tracks(args.export_tracks, controls)

        if args.export_step:
            export_step(args.export_step, controls)

        if args.animate:
            animate(AnimationTarget(args.animate), controls, save=args.save)
    except (OSError, RuntimeError, ValueError) as exc:
        print(f"[error] {exc}")
        return 1

    print("\nDone.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
