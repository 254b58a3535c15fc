"""Generate CLI command."""

import argparse


def cmd_generate(args: argparse.Namespace) -> int:
    from viewbind.codegen.generator import generate_all
    from viewbind.scene.reader import read_tree
    from viewbind.settings import load_settings

    try:
        settings = load_settings(args.settings)
    except ValueError as e:
        print(f"ERROR: invalid settings: {e}")
        return 1

    roots = []
    read_errors = []
    for path in args.trees:
        try:
            roots.append(read_tree(path))
        except Exception as e:
            read_errors.append({"root": path, "error": str(e)})

    result = generate_all(
        roots,
        settings,
        output_dir=args.output_dir,
        dry_run=args.dry_run,
    )
    errors = read_errors + result["errors"]

    print("View Generation Results")
    print("─" * 40)
    print(f"  Created:   {len(result['created'])}")
    print(f"  Updated:   {len(result['updated'])}")
    print(f"  Unchanged: {len(result['unchanged'])}")
    for res in result["results"]:
        if res.recovered_regions:
            print(f"  Recovered markers in {res.artifact_path}: {', '.join(res.recovered_regions)}")
    if errors:
        print(f"  Errors:    {len(errors)}")
        for e in errors:
            print(f"    - {e['root']}: {e['error']}")

    if result.get("dry_run"):
        print("\n[DRY RUN] No files were modified.")

    return 1 if errors else 0
