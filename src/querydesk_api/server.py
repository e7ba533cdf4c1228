#!/usr/bin/env python
"""
querydesk API Startup Script

This script starts the querydesk API server.
"""

import argparse
import uvicorn


def main():
    parser = argparse.ArgumentParser(description='querydesk API Server')
    parser.add_argument('--host', default='127.0.0.1', help='Host to bind to (default: 127.0.0.1)')
    parser.add_argument('--port', type=int, default=8000, help='Port to bind to (default: 8000)')
    parser.add_argument('--reload', action='store_true', help='Enable auto-reload (development)')

    args = parser.parse_args()

    uvicorn.run(
        'querydesk_api.main:app',
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info"
    )

if __name__ == '__main__':
    main()
