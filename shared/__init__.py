"""
Shared configuration, error types and entity schemas.
"""
