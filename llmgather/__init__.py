"""llmgather: gather a project's directory tree and file contents into one text summary."""

__version__ = "0.1.0"
