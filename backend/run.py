#!/usr/bin/env python3
"""
Pulpuluck Backend - Run Script
This script starts the FastAPI feedback API
"""

import os
import sys
import subprocess
import socket
from pathlib import Path
from urllib.parse import urlparse

def print_colored(message, color="blue"):
    """Print colored output"""
    colors = {
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "reset": "\033[0m"
    }
    print(f"{colors.get(color, '')}{message}{colors['reset']}")

def check_port_open(host, port):
    """Check if a port is open"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.settimeout(2)
        return sock.connect_ex((host, port)) == 0

def main():
    print_colored("🚀 Starting Pulpuluck Backend...", "blue")

    if not Path("pulpuluck/main.py").exists():
        print_colored("❌ Error: pulpuluck/main.py not found. Please run this script from the backend directory.", "red")
        sys.exit(1)

    if not Path("../.env").exists() and not Path(".env").exists():
        print_colored("ℹ️  No .env file found, using default settings (local JSON storage).", "yellow")

    # MongoDB is only needed for STORAGE_MODE=mongodb
    from pulpuluck.core.config import settings
    if settings.STORAGE_MODE == "mongodb":
        print_colored("🔍 Checking MongoDB connection...", "blue")
        mongo = urlparse(settings.MONGO_URI)
        if not check_port_open(mongo.hostname or "localhost", mongo.port or 27017):
            print_colored(f"⚠️  Warning: MongoDB doesn't appear to be running at {settings.MONGO_URI}", "yellow")
            response = input("Continue anyway? (y/N): ").strip().lower()
            if response != 'y':
                sys.exit(1)
    else:
        print_colored(f"📁 Feedback stored in {Path(settings.DATA_DIR) / settings.FEEDBACK_FILE}", "blue")

    if not os.environ.get('VIRTUAL_ENV'):
        print_colored("⚠️  Virtual environment not activated.", "yellow")

    print_colored("✅ All checks passed!", "green")
    print_colored("🌐 Starting Uvicorn server...", "blue")
    print("📍 Backend will be available at: http://localhost:8000")
    print("📍 API Documentation: http://localhost:8000/docs")
    print()
    print("Press Ctrl+C to stop the server")
    print()

    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "pulpuluck.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", "8000"
        ], check=True)
    except KeyboardInterrupt:
        print_colored("\n👋 Backend server stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        print_colored(f"\n❌ Error starting server: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
