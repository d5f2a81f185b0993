"""
Authoritative realtime pong server.
"""
