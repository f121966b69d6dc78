"""chatapp entrypoint.

Run with:
  python -m chatapp
"""

import logging
import sys

import uvicorn

from chatapp.config import server_options


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    uvicorn.run("chatapp.app:create_app", factory=True, **server_options())

if __name__ == "__main__":
    main()
