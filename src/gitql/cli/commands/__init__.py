"""gitql CLI subcommands."""
