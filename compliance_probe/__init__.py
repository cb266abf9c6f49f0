"""
Compliance probe engine
Time-bounded probes for regulatory posture and resource exposure of web pages
"""

__version__ = "1.0.0"
