# runtrack/errors.py

"""
runtrack.errors

Central exception hierarchy for runtrack.

The engine itself (core/analyze/edit) never raises for bad data: it
answers with None, zero values or the unchanged input. These errors are
for the I/O boundary only (config files, GPX documents).
"""


class RunTrackError(RuntimeError):
    """Base class for all runtrack runtime errors."""


# ---- Configuration errors ---------------------

class ConfigError(RunTrackError):
    """A config file exists but could not be parsed."""


# ---- Format errors ----------------------------

class FormatError(RunTrackError):
    """Errors reading or writing track files."""

class InvalidGpxError(FormatError):
    """GPX file could not be parsed or did not contain track points."""
