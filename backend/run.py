#!/usr/bin/env python3
"""
LLM Maps Backend - Run Script
This script starts the FastAPI backend server
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

def check_file_exists(filepath, error_message):
    """Check if a file exists"""
    if not Path(filepath).exists():
        print_colored(f"❌ Error: {error_message}", "red")
        sys.exit(1)

def check_port_open(host, port):
    """Check if a port is open"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.settimeout(2)
    result = sock.connect_ex((host, port))
    sock.close()
    return result == 0

def main():
    print_colored("🚀 Starting LLM Maps Backend...", "blue")

    # Check if we're in the backend directory
    check_file_exists("llm_maps/main.py", "llm_maps/main.py not found. Please run this script from the backend directory.")

    # Check if .env exists in this directory or the project root
    if not Path(".env").exists() and not Path("../.env").exists():
        print_colored("⚠️  Warning: .env file not found.", "yellow")
        print("Please create a .env file with the following variables:")
        print("  GOOGLE_MAPS_API_KEY=your_server_key_here")
        print("  GOOGLE_MAPS_CLIENT_KEY=your_client_key_here")
        print("  OPEN_WEBUI_BASE_URL=http://localhost:3000")
        print("  OPEN_WEBUI_MODEL=llama2")
        print("  OPEN_WEBUI_API_KEY=your_token_here")
        sys.exit(1)

    # Check if virtual environment is activated
    if not os.environ.get('VIRTUAL_ENV'):
        print_colored("⚠️  Virtual environment not activated.", "yellow")
        print("Please activate your virtual environment first:")
        print("  source venv/bin/activate  # On macOS/Linux")
        print("  venv\\Scripts\\activate     # On Windows")
        sys.exit(1)

    # Check if dependencies are installed
    print_colored("🔍 Checking dependencies...", "blue")
    try:
        import fastapi
        import uvicorn
    except ImportError:
        print_colored("❌ Dependencies not installed.", "red")
        print("Installing dependencies...")
        subprocess.run([sys.executable, "-m", "pip", "install", "-e", ".."], check=True)

    from llm_maps.core.config import settings

    # The classifier is optional: without it every query goes through the keyword fallback
    print_colored("🔍 Checking Open WebUI connection...", "blue")
    webui = urlparse(settings.OPEN_WEBUI_BASE_URL)
    if not check_port_open(webui.hostname or "localhost", webui.port or 80):
        print_colored(f"⚠️  Warning: Open WebUI doesn't appear to be running at {settings.OPEN_WEBUI_BASE_URL}", "yellow")
        print("Queries will be classified with the keyword fallback parser.")

    if not settings.GOOGLE_MAPS_API_KEY:
        print_colored("⚠️  Warning: GOOGLE_MAPS_API_KEY is not set", "yellow")

    # Start the server
    print_colored("✅ All checks passed!", "green")
    print_colored("🌐 Starting Uvicorn server...", "blue")
    print(f"📍 Backend will be available at: http://localhost:{settings.PORT}")
    print(f"📍 API Health check: http://localhost:{settings.PORT}/health")
    print(f"📍 API Documentation: http://localhost:{settings.PORT}/docs")
    print()
    print("Press Ctrl+C to stop the server")
    print()

    # Run uvicorn with auto-reload for development
    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "llm_maps.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", str(settings.PORT)
        ], check=True)
    except KeyboardInterrupt:
        print_colored("\n👋 Backend server stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        print_colored(f"\n❌ Error starting server: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
