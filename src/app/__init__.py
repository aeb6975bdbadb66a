"""HTTP/WebSocket surface for the Nebula Defender simulation."""
