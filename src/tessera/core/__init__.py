"""Core building blocks: configuration, I/O, templates and composition."""
