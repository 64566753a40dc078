"""
Sync 진입점

실행 방법:
    python -m sync [--account 0.0.x] [--limit N] [--secrets path]
"""

from sync.bootstrap import cli

if __name__ == "__main__":
    cli()
