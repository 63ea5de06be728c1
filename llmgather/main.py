# llmgather/main.py
"""Main entry point for the llmgather CLI application."""

from llmgather.cli.interface import main_cli


def entrypoint():
    """Function to be called by the script defined in pyproject.toml."""
    main_cli(prog_name="llmgather")

if __name__ == '__main__':
    entrypoint()
