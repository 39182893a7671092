"""HTTP/WebSocket server for the browser map client."""
