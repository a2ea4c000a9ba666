"""
Command line interface for stageops.
"""
