"""Entry point for running the API server."""

import os

import uvicorn

if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    # PORT is set by PaaS platforms (Railway, Heroku, etc.)
    port = int(os.getenv("PORT") or "8000")
    uvicorn.run("api.main:app", host=host, port=port)
