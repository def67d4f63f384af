#!/usr/bin/env python3
"""
Launcher for the Time Block Planner API.
Run this from the root directory to start the application.
"""

import uvicorn
from timeblock.config import LOG_LEVEL

if __name__ == "__main__":
    print("Starting Time Block Planner API with auto-reload...")
    print("API Documentation: http://localhost:8000/docs")
    print("Health Check: http://localhost:8000/health")
    print("-" * 50)

    # Import string format so reload can re-import the app
    uvicorn.run(
        "timeblock.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["timeblock"],
        log_level=LOG_LEVEL.lower()
    )
