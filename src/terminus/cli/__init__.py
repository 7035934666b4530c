"""Terminal UI: core I/O, widgets and the console application."""
