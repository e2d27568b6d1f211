"""SCS Toolkit - build HashFS v2 archives from directory trees."""

__version__ = "0.1.0"
