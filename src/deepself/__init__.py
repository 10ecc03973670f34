"""deepself - agent tools for creating, training, and chatting with deepself models."""

__version__ = "0.1.0"


def main() -> int:
    """Run the CLI entry point with lazy import."""
    from deepself.cli import main as cli_main

    return cli_main()


__all__ = ["main", "__version__"]
