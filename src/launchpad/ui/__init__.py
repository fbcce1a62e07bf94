"""Terminal and TUI front-ends."""
