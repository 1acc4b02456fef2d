"""autocommit — draft conventional commit messages from staged changes with an LLM."""

__version__ = "1.0.0"
