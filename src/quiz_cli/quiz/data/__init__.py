"""Packaged data files: the default question bank and config template."""
