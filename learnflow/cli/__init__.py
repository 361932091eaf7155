"""Command-line interface for learnflow."""
