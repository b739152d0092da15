"""Run the service with uvicorn: `python -m otpcache`."""

import uvicorn


if __name__ == "__main__":
    uvicorn.run("otpcache.main:app", host="0.0.0.0", port=8000)
