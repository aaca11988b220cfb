"""Version information for gwtmux."""

try:
    from gwtmux._version import __version__
except ImportError:
    # Running from a source checkout that was never built
    __version__ = "0.0.0+unknown"
