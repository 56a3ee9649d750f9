"""Command-line interface for climgrid.

This package holds the argument parsing and execution logic behind the
``climgrid`` console script.
"""

from climgrid.cli.main import main, setup_logging, load_user_config_dict

__all__ = ['main', 'setup_logging', 'load_user_config_dict']
