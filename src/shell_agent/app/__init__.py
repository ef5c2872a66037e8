"""Command line application: configuration, shell detection, prompts, history and output."""
