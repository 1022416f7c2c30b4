"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants (zoom policy, storage key, naming)
- exceptions: Custom exception hierarchy
- capabilities: Host capability detection for scheduling decisions
"""
