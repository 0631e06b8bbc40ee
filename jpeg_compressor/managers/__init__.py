"""Background helpers attached to the main window."""
