"""Run the tradeledger REST API: python -m tradeledger"""

from dotenv import load_dotenv

# Environment overrides must be loaded before the config module is imported
load_dotenv()

from .api.rest_api import run_server  # noqa: E402

if __name__ == "__main__":
    run_server()
