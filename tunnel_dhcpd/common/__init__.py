# STATUS: done
"""Configuration generation shared by the CLI tools."""
