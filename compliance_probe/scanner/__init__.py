"""
Scanner: fetching, discovery, classification and the probes built on them
"""
