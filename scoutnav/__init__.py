"""scoutnav: interactive browser for ScoutSuite danger-level findings."""

__app_name__ = "scoutnav"
__version__ = "0.1.0"
