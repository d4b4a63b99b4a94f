#!/usr/bin/env python3
"""
Pulpuluck Frontend - Run Script
This script starts the Streamlit map
"""

import sys
import subprocess
from pathlib import Path

import requests

from pulpuluck.core.config import settings

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

def check_http_endpoint(url):
    """Check if HTTP endpoint is accessible"""
    try:
        return requests.get(url, timeout=2).ok
    except requests.exceptions.RequestException:
        return False

def main():
    print_colored("🚀 Starting Pulpuluck Frontend...", "blue")

    if not Path("app.py").exists():
        print_colored("❌ Error: app.py not found. Please run this script from the frontend directory.", "red")
        sys.exit(1)

    # The map works without the backend; only voting needs it
    print_colored("🔍 Checking feedback API...", "blue")
    if not check_http_endpoint(f"{settings.BACKEND_URL}/health"):
        print_colored(f"⚠️  Feedback API not reachable at {settings.BACKEND_URL}, voting will be disabled.", "yellow")
        print("Start it with:")
        print("  cd backend && python run.py")
        print()

    print_colored("✅ All checks passed!", "green")
    print_colored("🌐 Starting Streamlit server...", "blue")
    print("📍 Frontend will be available at: http://localhost:8501")
    print()
    print("Press Ctrl+C to stop the server")
    print()

    try:
        subprocess.run([
            sys.executable, "-m", "streamlit",
            "run", "app.py"
        ], check=True)
    except KeyboardInterrupt:
        print_colored("\n👋 Frontend server stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        print_colored(f"\n❌ Error starting server: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
