"""Run saferenv as ``python -m saferenv``."""

from saferenv.cli import run

if __name__ == "__main__":
    run()
