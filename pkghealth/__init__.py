"""pkghealth: dependency health scanning for npm projects."""

__version__ = "2.0.0"
