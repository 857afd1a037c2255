import logging

import uvicorn

from .config import APP_HOST, APP_PORT, LOG_LEVEL


def main():
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print(f"Oliv.ai matcher running on http://localhost:{APP_PORT} (Press CTRL+C to quit)")
    uvicorn.run("oliv.app:app", host=APP_HOST, port=APP_PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
