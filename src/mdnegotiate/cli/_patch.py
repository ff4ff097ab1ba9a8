"""``md-negotiate patch``: add rewrite rules to a Next.js style config.

Finds ``next.config.{ts,mjs,js}``, patches it in place, and falls back to
printing the snippet for manual insertion when the file's shape is not
recognized. Creates ``next.config.ts`` when no config exists.
"""

import argparse
import sys
from pathlib import Path

from mdnegotiate.cli._resolve import rules_from_args
from mdnegotiate.patching import ConfigPatcher, PatchStatus, rewrites_snippet

CONFIG_NAMES = ("next.config.ts", "next.config.mjs", "next.config.js")


def find_config(directory: Path) -> Path | None:
    """First existing config file in *directory*, by preference order."""
    for name in CONFIG_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def _print_manual_instructions(patcher: ConfigPatcher) -> None:
    print("  Please add the following to your config object manually:\n", file=sys.stderr)
    print(patcher.snippet.method("  "), file=sys.stderr)


def run_patch(args: argparse.Namespace) -> None:
    """Patch (or create) the config file. Exits 1 if the shape is unsupported."""
    patcher = ConfigPatcher(rewrites_snippet(rules_from_args(args)))
    target = Path(args.path)

    config_path = target if target.is_file() else find_config(target)
    if config_path is None:
        if not target.is_dir():
            print(f"Error: {target} is not a file or directory", file=sys.stderr)
            raise SystemExit(1)
        config_path = target / CONFIG_NAMES[0]
        text = patcher.new_config()
        if args.dry_run:
            print(text, end="")
            return
        config_path.write_text(text, encoding="utf-8")
        print(f"  Created {config_path.name} with rewrites")
        return

    result = patcher.patch(config_path.read_text(encoding="utf-8"))

    if result.status is PatchStatus.ALREADY_PATCHED:
        print(f"  {config_path.name} already has rewrite configuration, skipped")
        return

    if result.status is PatchStatus.UNSUPPORTED:
        print(f"  Could not update {config_path.name}: {result.reason}", file=sys.stderr)
        _print_manual_instructions(patcher)
        raise SystemExit(1)

    if args.dry_run:
        print(result.text, end="")
        return
    config_path.write_text(result.text, encoding="utf-8")
    print(f"  Updated {config_path.name} with rewrites ({result.shape.value})")
