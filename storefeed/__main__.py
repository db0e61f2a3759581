import logging
import sys

from .config import get_settings
from .pipeline import run
from .stores import UnknownStoreError


def main(argv=None) -> int:
    #   python -m storefeed            -> store from STOREFEED_STORE (default kofi)
    #   python -m storefeed acggoods   -> override the store
    argv = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        settings = get_settings()
        if argv:
            settings = settings.model_copy(update={"store": argv[0]})
        run(settings)
    except (UnknownStoreError, RuntimeError) as e:
        print(f"storefeed: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
