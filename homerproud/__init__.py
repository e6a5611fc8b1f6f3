"""Make Homer Proud: a Pomodoro timer coached by the Greek gods."""

__version__ = "0.1.0"
