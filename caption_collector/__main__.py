"""Package entry point for ``python -m caption_collector``: serves the API with uvicorn."""
from caption_collector.main import run_api

if __name__ == "__main__":
    run_api()
