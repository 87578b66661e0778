"""
Shared Infrastructure Layer
Persistence, security, messaging, and observability
"""
