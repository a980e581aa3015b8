import logging

import uvicorn

from plyrlink.core.config import get_settings


def main():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.serverless:
        # The serverless host imports plyrlink.api.main:app itself
        logging.getLogger("plyrlink").info("VERCEL set, not starting a server")
        return
    uvicorn.run("plyrlink.api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
