"""
Shared configuration, logging and metrics utilities.
"""
