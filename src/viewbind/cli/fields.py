"""Fields CLI command."""

import argparse
import json


def cmd_fields(args: argparse.Namespace) -> int:
    from viewbind.binding import collect_fields
    from viewbind.scene.reader import read_tree
    from viewbind.settings import load_settings

    try:
        settings = load_settings(args.settings)
        root = read_tree(args.tree)
    except Exception as e:
        print(f"ERROR: {args.tree}: {e}")
        return 1

    descriptors = collect_fields(root, settings)

    if args.json:
        data = [
            {
                "type": d.type_name,
                "field": d.field_name,
                "path": d.path_string,
                "capability_reference": d.is_capability_reference,
                "index": d.capability_index,
            }
            for d in descriptors
        ]
        print(json.dumps(data, indent=2))
        return 0

    print(f"{root.name}: {len(descriptors)} fields\n")
    for d in descriptors:
        where = d.path_string or "(root)"
        suffix = f"[{d.capability_index}]" if d.capability_index else ""
        print(f"  {d.field_name:<28} {d.type_name:<36} {where}{suffix}")
    return 0
