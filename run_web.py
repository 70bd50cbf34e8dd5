"""
RideCalc Web API Launcher
Simple script to start the API server without the GUI
"""
import logging
import sys
import os

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import config

print("Starting RideCalc API...")
print()

try:
    from api import app
except ImportError as e:
    print(f"Error importing modules: {e}")
    print("\nMake sure you have installed the required dependencies:")
    print("  pip install -e .")
    sys.exit(1)

if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    try:
        app.run(host=config.WEB_HOST, port=config.WEB_PORT, debug=False)
    except OSError as e:
        print(f"Error starting server: {e}")
        print("\nTroubleshooting:")
        print(f"1. Check if another application is using port {config.WEB_PORT}")
        print("2. Check firewall settings")
        sys.exit(1)
