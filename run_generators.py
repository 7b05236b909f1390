#!/usr/bin/env python3
"""
IPTV page generators — single-command build of every derived data file.

Usage:
    python run_generators.py
    python run_generators.py --data-dir data --output-dir build/data
    python run_generators.py --dry-run

Reads players.json and devices.json (plus features.json / issues.json when
present), generates comparisons, setup guides, best-for pages, feature and
troubleshooting guides, and rewrites the catalogs with related-entity fields.
If any input is malformed or any quality gate fails, the run HALTS and
nothing is written.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from generators import config
from generators.compatibility import load_rules
from generators.step_01_catalog import CatalogError, load_catalogs
from generators.step_02_relationships import annotate_devices, annotate_players
from generators.step_03_comparisons import generate_comparisons
from generators.step_04_guides import generate_guides
from generators.step_05_best_for import generate_best_for
from generators.step_06_feature_guides import generate_feature_guides
from generators.step_07_troubleshooting import generate_troubleshooting
from generators.step_08_write import write_outputs
from generators.templating import resolve_generated_at

from gates.quality_gates import (
    gate_1_catalogs,
    gate_2_relationships,
    gate_3_comparisons,
    gate_4_guides,
    gate_5_collection,
)


def build_outputs(
    data_dir: Path,
    output_dir: Path,
    compatibility_file: Optional[Path] = None,
    generated_at: Optional[str] = None,
    rewrite_catalogs: bool = True,
) -> Dict[Path, List]:
    """Load, generate and gate everything. Returns {output path: payload}.

    Nothing touches the filesystem except reads; the caller decides whether
    to write.
    """
    moment = resolve_generated_at(generated_at)

    # ── Step 1: Load catalogs ────────────────────────────────
    _step("1", "LOAD CATALOGS")
    catalogs = load_catalogs(data_dir)
    rules = load_rules(compatibility_file)
    gate_1_catalogs(catalogs)
    _ok()
    players, devices = catalogs["players"], catalogs["devices"]
    print(f"   Players: {len(players)}")
    print(f"   Devices: {len(devices)}")

    # ── Step 2: Relationships ────────────────────────────────
    _step("2", "RELATIONSHIPS")
    annotated_players = annotate_players(players, devices, rules)
    annotated_devices = annotate_devices(devices, rules)
    gate_2_relationships(annotated_players, annotated_devices)
    _ok()

    # ── Step 3: Comparisons ──────────────────────────────────
    _step("3", "COMPARISONS")
    comparisons = generate_comparisons(players, devices, moment)
    gate_3_comparisons(comparisons, players, devices)
    _ok()
    print(f"   Player comparisons: {len(comparisons['players'])}")
    print(f"   Device comparisons: {len(comparisons['devices'])}")

    # ── Step 4: Setup guides ─────────────────────────────────
    _step("4", "SETUP GUIDES")
    guides = generate_guides(players, devices, rules, moment)
    gate_4_guides(guides, players, devices)
    _ok()
    print(f"   Player-device guides: {len(guides)}")

    player_ids = {p["id"] for p in players}
    device_ids = {d["id"] for d in devices}

    # ── Step 5: Best-for pages ───────────────────────────────
    _step("5", "BEST-FOR PAGES")
    best_for = generate_best_for(devices, players, moment)
    gate_5_collection(best_for, "best-for", {"deviceId": device_ids})
    _ok()

    outputs = {
        output_dir / config.PLAYER_COMPARISONS_FILE: comparisons["players"],
        output_dir / config.DEVICE_COMPARISONS_FILE: comparisons["devices"],
        output_dir / config.PLAYER_DEVICE_GUIDES_FILE: guides,
        output_dir / config.BEST_FOR_FILE: best_for,
    }

    # ── Step 6: Feature guides ───────────────────────────────
    if catalogs["features"] is not None:
        _step("6", "FEATURE GUIDES")
        feature_ids = {f["id"] for f in catalogs["features"]}
        feature_guides = generate_feature_guides(players, devices, catalogs["features"], moment)
        gate_5_collection(feature_guides["players"], "player features",
                          {"playerId": player_ids, "featureId": feature_ids})
        gate_5_collection(feature_guides["devices"], "device features",
                          {"deviceId": device_ids, "featureId": feature_ids})
        _ok()
        outputs[output_dir / config.PLAYER_FEATURE_GUIDES_FILE] = feature_guides["players"]
        outputs[output_dir / config.DEVICE_FEATURE_GUIDES_FILE] = feature_guides["devices"]
    else:
        print("[Step 6] FEATURE GUIDES ... SKIPPED (no features.json)")

    # ── Step 7: Troubleshooting ──────────────────────────────
    if catalogs["issues"] is not None:
        _step("7", "TROUBLESHOOTING")
        issue_ids = {i["id"] for i in catalogs["issues"]}
        troubleshooting = generate_troubleshooting(players, devices, catalogs["issues"], rules, moment)
        gate_5_collection(troubleshooting["players"] + troubleshooting["devices"], "troubleshooting",
                          {"playerId": player_ids, "deviceId": device_ids, "issueId": issue_ids})
        _ok()
        outputs[output_dir / config.PLAYER_TROUBLESHOOTING_FILE] = troubleshooting["players"]
        outputs[output_dir / config.DEVICE_TROUBLESHOOTING_FILE] = troubleshooting["devices"]
    else:
        print("[Step 7] TROUBLESHOOTING ... SKIPPED (no issues.json)")

    if rewrite_catalogs:
        outputs[data_dir / config.PLAYERS_FILE] = annotated_players
        outputs[data_dir / config.DEVICES_FILE] = annotated_devices

    return outputs


def run_generators(
    data_dir: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    compatibility_file: Optional[Path] = None,
    generated_at: Optional[str] = None,
    rewrite_catalogs: bool = True,
    dry_run: bool = False,
) -> Dict[Path, List]:
    """Run the full generation batch and write the results."""
    print("=" * 60)
    print("IPTV PAGE GENERATORS")
    print("=" * 60)

    data_dir = Path(data_dir) if data_dir else config.DATA_DIR
    output_dir = Path(output_dir) if output_dir else config.OUTPUT_DIR

    outputs = build_outputs(
        data_dir,
        output_dir,
        compatibility_file=compatibility_file,
        generated_at=generated_at,
        rewrite_catalogs=rewrite_catalogs,
    )

    # ── Step 8: Write ────────────────────────────────────────
    if dry_run:
        print("[Step 8] WRITE ... SKIPPED (dry run)")
        for path, payload in outputs.items():
            print(f"   {path}: {len(payload)} records")
        return outputs

    _step("8", "WRITE")
    write_outputs(outputs)
    _ok()

    total = sum(len(v) for p, v in outputs.items() if p.parent != data_dir or p.name not in (
        config.PLAYERS_FILE, config.DEVICES_FILE))
    print(f"\nDone. {total} pages generated in {output_dir}/")
    return outputs


def _log_level(verbose: bool):
    return logging.DEBUG if verbose else config.LOG_LEVEL.upper()


def _step(num: str, label: str):
    print(f"[Step {num}] {label} ", end="", flush=True)


def _ok():
    print("... OK")


# ── CLI ──────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Generate IPTV comparison and guide data")
    parser.add_argument("--data-dir", default=None,
                        help="Directory holding players.json / devices.json (default: IPTV_DATA_DIR or data/)")
    parser.add_argument("--output-dir", default=None,
                        help="Directory for generated files (default: IPTV_OUTPUT_DIR or the data dir)")
    parser.add_argument("--compatibility", default=None,
                        help="YAML file extending the built-in compatibility tables")
    parser.add_argument("--generated-at", default=None,
                        help="Pin the run timestamp (ISO 8601) for reproducible output")
    parser.add_argument("--skip-catalog-rewrite", action="store_true",
                        help="Do not write related fields back into players.json / devices.json")
    parser.add_argument("--dry-run", action="store_true", help="Generate and gate, but write nothing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=_log_level(args.verbose),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    data_dir = Path(args.data_dir) if args.data_dir else None
    output_dir = Path(args.output_dir) if args.output_dir else (data_dir if args.data_dir else None)
    compatibility = args.compatibility or config.COMPATIBILITY_FILE or None

    try:
        run_generators(
            data_dir=data_dir,
            output_dir=output_dir,
            compatibility_file=Path(compatibility) if compatibility else None,
            generated_at=args.generated_at or config.GENERATED_AT or None,
            rewrite_catalogs=not args.skip_catalog_rewrite,
            dry_run=args.dry_run,
        )
    except CatalogError as e:
        print(f"\nFATAL: {e}")
        sys.exit(1)
    except AssertionError as e:
        print(f"\nFATAL: quality gate failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
