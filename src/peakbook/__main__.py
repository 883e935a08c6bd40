"""Run the API with uvicorn."""

import uvicorn


def run() -> None:
    """Console entry point."""
    uvicorn.run("peakbook.main:app", host="0.0.0.0", port=5000)


if __name__ == "__main__":
    run()
