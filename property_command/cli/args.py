"""
Argument parsing helpers shared by property_command scripts.
"""

from property_command.commands.models import Tab


def add_execute_argument(parser):
    """
    Add standard --execute argument to an ArgumentParser.

    Args:
        parser: argparse.ArgumentParser instance
    """
    parser.add_argument(
        "--execute",
        action="store_true",
        help="Actually call external data sources (default is dry-run)",
    )


def add_tab_argument(parser):
    """Add --tab, the active UI tab used for context-specific commands."""
    parser.add_argument(
        "--tab",
        choices=[tab.value for tab in Tab],
        default=None,
        help="Active tab (enables tab-specific commands)",
    )


def add_verbose_argument(parser):
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show per-source failure reasons",
    )
