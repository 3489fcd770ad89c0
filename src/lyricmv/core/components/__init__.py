"""Core component packages (scenes, render)."""
