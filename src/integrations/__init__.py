"""
External mail provider integrations behind the mail port.
"""
