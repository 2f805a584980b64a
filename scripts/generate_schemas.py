#!/usr/bin/env python3
import argparse
import json
from pathlib import Path

from character_vault.characters.models import export_json_schema


def main() -> int:
    parser = argparse.ArgumentParser(description="Write the character record JSON Schema")
    parser.add_argument("--out-dir", default="schemas", help="Output directory")
    args = parser.parse_args()

    out_dir = Path(args.out_dir).resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    target = out_dir / "character.schema.json"
    target.write_text(json.dumps(export_json_schema(), indent=2), encoding="utf-8")
    print(f"Wrote schema to {target}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
