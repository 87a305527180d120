#!/usr/bin/env python3
"""
Generate sol2 bindings for every module listed in a modules file.

The modules file is a JSON list of {"records": PATH, "module": NAME}
entries; "module" is optional and defaults to the name stored in the
records file.

Usage:
    python scripts/gen_all_bindings.py modules.json [-j N] [-o DIR] [--config FILE]
"""

import argparse
import json
import os
import sys
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent.resolve()
sys.path.insert(0, str(SCRIPT_DIR))

from sol_bindgen import Generator, GenerationOptions, RecordSet


def load_modules(path):
    """Load module definitions from a modules file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def run_generator(task):
    """Generate one module in a worker process. Returns (module, success, output lines)."""
    entry, options = task
    try:
        record_set = RecordSet.load(entry["records"])
    except (OSError, ValueError) as e:
        return entry.get("module") or entry["records"], False, [f"error: {e}"]

    module = entry.get("module") or record_set.module
    if not module:
        return entry["records"], False, ["error: no module name"]

    # each worker owns its generator; nothing is shared between modules
    result = Generator(options).generate_file(module, record_set.records)
    output = [f"warning: {w}" for w in result.warnings]
    output += [f"error: {e}" for e in record_set.errors + result.errors]
    return module, result.success, output


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate sol2 bindings for several modules")
    parser.add_argument("modules", help="JSON list of modules to generate")
    parser.add_argument("-j", "--jobs", type=int, default=os.cpu_count(),
                        help=f"Number of parallel jobs (default: {os.cpu_count()})")
    parser.add_argument("-o", "--output", default=None, help="Output directory")
    parser.add_argument("--config", default=None, help="JSON file with generation options")
    args = parser.parse_args(argv)

    try:
        options = GenerationOptions.load(args.config) if args.config else GenerationOptions()
        modules = load_modules(args.modules)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    if args.output:
        options.output_directory = args.output

    # Filter modules with existing records files
    tasks = []
    for entry in modules:
        if not Path(entry["records"]).exists():
            print(f"Skipping {entry.get('module', entry['records'])}: missing {entry['records']}")
            continue
        tasks.append((entry, options))

    print(f"Generating {len(tasks)} modules with {args.jobs} parallel jobs...")

    success_count = 0
    fail_count = 0
    failed = []

    with ProcessPoolExecutor(max_workers=args.jobs) as executor:
        futures = {executor.submit(run_generator, task): task[0]["records"] for task in tasks}

        for future in as_completed(futures):
            module, success, output = future.result()
            if success:
                success_count += 1
                print(f"  [OK] {module}")
            else:
                fail_count += 1
                failed.append(module)
                print(f"  [FAIL] {module}")
            for line in output:
                print(f"       {line}")

    print(f"\nResults: {success_count} succeeded, {fail_count} failed")
    if failed:
        print(f"Failed: {', '.join(failed)}")

    return 0 if fail_count == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
