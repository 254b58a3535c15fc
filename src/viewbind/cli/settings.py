"""Settings CLI commands."""

import argparse
from pathlib import Path


def cmd_settings_init(args: argparse.Namespace) -> int:
    from viewbind.paths import settings_path
    from viewbind.settings import GenerationSettings, save_settings

    target = Path(args.settings) if args.settings else settings_path()
    if target.exists() and not args.force:
        print(f"Settings file already exists: {target} (use --force to overwrite)")
        return 1

    written = save_settings(GenerationSettings(), target)
    print(f"Wrote default settings to {written}")
    return 0


def cmd_settings_show(args: argparse.Namespace) -> int:
    import yaml

    from viewbind.settings import load_settings, settings_to_dict

    try:
        settings = load_settings(args.settings)
    except (ValueError, yaml.YAMLError) as e:
        print(f"ERROR: invalid settings: {e}")
        return 1

    print(yaml.safe_dump(settings_to_dict(settings), sort_keys=False, allow_unicode=True), end="")
    return 0
