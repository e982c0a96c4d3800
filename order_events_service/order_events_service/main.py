"""Main entry point for the Order Events Service."""

import os

import uvicorn

from order_events_service.server import app

if __name__ == "__main__":
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")))
