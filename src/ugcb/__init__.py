"""UGC Builder - AI-assisted creative briefs for UGC video ads."""

__version__ = "0.1.0"
