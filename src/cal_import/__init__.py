"""Insert events described in a plain-text file into a Google Calendar."""

__version__ = "0.1.0"
