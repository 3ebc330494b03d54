"""Health check endpoint."""

from http.server import BaseHTTPRequestHandler
import json

from mls.utils.logging_config import AppConfig


class handler(BaseHTTPRequestHandler):
    """Health check handler for Vercel serverless function."""

    def do_GET(self):
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        self.end_headers()
        response = json.dumps({
            "status": "ok",
            "service": "mls-backend",
            "environment": AppConfig.ENVIRONMENT,
        })
        self.wfile.write(response.encode('utf-8'))

    def do_POST(self):
        self.do_GET()
