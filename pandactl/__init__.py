"""Robot state and error types, low-pass filtering and rate limiting for a research arm."""

__version__ = "0.9.2"
__all__ = ["errors", "robot_state", "lowpass_filter", "rate_limiting"]