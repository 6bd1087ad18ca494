"""Run a ROM: python main.py <rom> [options]"""

from chipvm.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
