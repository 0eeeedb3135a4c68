from .cli import main
from .logger import get_logger


if __name__ == "__main__":  # pragma: no cover - entry point
    get_logger(__name__).debug("burnin module executed as a script")
    main()
