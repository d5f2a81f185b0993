"""
Process configuration read from the environment.
"""
import os

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT") or 4000)

# Comma separated, "*" allows everything
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Seconds a finished room lingers waiting for a restart before it is removed
GAME_OVER_ROOM_TTL = float(os.getenv("GAME_OVER_ROOM_TTL") or 30)
