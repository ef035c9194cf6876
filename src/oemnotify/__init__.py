"""oem-notify - Oracle Enterprise Manager event notification relay."""

__version__ = "0.1.0"
