"""medcms: a local content repository for medical-reference records."""

__version__ = "0.1.0"
