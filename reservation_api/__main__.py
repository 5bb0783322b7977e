"""Serve the API with uvicorn: ``python -m reservation_api``."""

import uvicorn

from reservation_api import config

if __name__ == "__main__":
    uvicorn.run("reservation_api.main:app", host=config.HOST, port=config.PORT)
