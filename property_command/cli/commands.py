"""
CLI command entry points for property_command.

These functions are registered as console scripts in pyproject.toml.
Each function delegates to the corresponding script in scripts/.
"""

import argparse
import subprocess
import sys
from pathlib import Path

from property_command.cache import get_cache
from property_command.config import get_cache_dir


def _run_script(script_name: str):
    """
    Run a script from scripts/ with this process's arguments.

    Args:
        script_name: Name of script file (without .py extension)
    """
    script = Path(__file__).parent.parent.parent / "scripts" / f"{script_name}.py"
    # Arguments are passed as a list (no shell) and validated by the script's argparse
    result = subprocess.run([sys.executable, str(script)] + sys.argv[1:], check=False)
    sys.exit(result.returncode)


def run_command():
    """Entry point for property-command."""
    _run_script("run_command")


def run_lookup():
    """Entry point for property-lookup."""
    _run_script("lookup_property_data")


def run_cache():
    """Entry point for property-cache: inspect or clear the property data cache."""
    parser = argparse.ArgumentParser(description="Manage the property data cache")
    parser.add_argument("command", choices=["stats", "clear"])
    parser.add_argument("--namespace", "-n", help="Namespace to clear")
    parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    args = parser.parse_args()

    cache = get_cache(get_cache_dir())

    if args.command == "stats":
        stats = cache.stats()
        print(f"Cache: {stats['cache_dir']}")
        print(f"  Total entries: {stats['total']}")
        print(f"  Size: {stats['size_mb']} MB")
        print("  By namespace:")
        for ns, count in sorted(stats["by_namespace"].items()):
            print(f"    {ns}: {count}")

    elif args.command == "clear":
        if not args.namespace:
            print("Specify --namespace to clear (e.g. --namespace property_data)")
            return
        if not args.yes:
            confirm = input(f"Clear all {args.namespace} entries? [y/N] ")
            if confirm.lower() != "y":
                print("Aborted")
                return
        count = cache.clear_namespace(args.namespace)
        print(f"Cleared {count} entries from {args.namespace}")
