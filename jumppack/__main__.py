"""Entry point for jumppack."""

from jumppack.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
