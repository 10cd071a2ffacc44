import uvicorn

from quicknote import config
from quicknote.main import setup_logging


def main() -> None:
    setup_logging(config.log_level())
    uvicorn.run("quicknote.main:app", host=config.listen_host(), port=config.listen_port(), log_config=None)


if __name__ == "__main__":
    main()
