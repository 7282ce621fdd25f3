"""
Utility functions for Lambda handler operations.

This package contains reusable service functions for configuration loading,
SSM parameter access and outgoing email construction.
"""

__all__ = ['email', 'settings', 'ssm']
