"""predictx command-line interface."""
