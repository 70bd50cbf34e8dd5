"""
RideCalc Field Calculator
Desktop entry point: the Tk window and the JSON API share one set of fields
"""
import logging
import socket
import threading
import tkinter as tk

import config
from api import app, session_manager
from gui import RideCalcGUI

logger = logging.getLogger(__name__)


def lan_address():
    """Address other devices on the network can reach this machine at"""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
        try:
            # UDP connect sends nothing; it only picks the outgoing interface
            probe.connect(('10.255.255.255', 1))
            return probe.getsockname()[0]
        except OSError:
            return '127.0.0.1'


def serve_api():
    """Run the Flask API on a daemon thread so it stops with the window"""
    def run():
        try:
            app.run(host=config.WEB_HOST, port=config.WEB_PORT, debug=False, use_reloader=False)
        except OSError as e:
            logger.error("API server could not start on port %s: %s", config.WEB_PORT, e)

    thread = threading.Thread(target=run, name="ridecalc-api", daemon=True)
    thread.start()

    print("="*60)
    print("RIDECALC API IS LIVE")
    print(f"This PC:      http://localhost:{config.WEB_PORT}/api")
    print(f"Your phone:   http://{lan_address()}:{config.WEB_PORT}/api")
    print("Fields edited there show up in this window.")
    print("="*60)
    return thread


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    serve_api()

    root = tk.Tk()
    RideCalcGUI(root, session_manager)
    root.mainloop()
    logger.info("Window closed, shutting down")


if __name__ == "__main__":
    main()
