"""
CGM bounded context
Linking a continuous glucose monitor account and keeping its OAuth tokens fresh
"""
