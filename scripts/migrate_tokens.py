#!/usr/bin/env python3
"""Copia tokens de sessão entre backends (file, redis, mongodb).

Uso:
    PYTHONPATH=src python scripts/migrate_tokens.py --source file --target mongodb --apply

Descritores de cada backend vêm das mesmas variáveis de ambiente do
servidor. Padrão: dry-run (não escreve nada).
"""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from app.bootstrap.dependencies_stores import create_token_store
from config.settings import get_server_options
from utils.errors import CorruptEntryError, NotFoundError

if TYPE_CHECKING:
    from app.protocols.token_store import TokenStoreProtocol

BACKENDS = ("file", "redis", "mongodb")


@dataclass(frozen=True)
class MigrationStats:
    scanned: int = 0
    copied: int = 0
    skipped_existing: int = 0
    corrupt: int = 0


async def migrate_tokens(
    source: TokenStoreProtocol,
    target: TokenStoreProtocol,
    *,
    apply: bool,
    overwrite: bool = False,
) -> MigrationStats:
    """Copia cada token do source para o target.

    Entradas corrompidas ou removidas durante a cópia são contadas e puladas.
    """
    stats = MigrationStats()
    for key in await source.list_keys():
        stats = replace(stats, scanned=stats.scanned + 1)
        try:
            value = await source.get(key)
        except (CorruptEntryError, NotFoundError):
            stats = replace(stats, corrupt=stats.corrupt + 1)
            continue
        if not overwrite and await target.exists(key):
            stats = replace(stats, skipped_existing=stats.skipped_existing + 1)
            continue
        if apply:
            await target.set(key, value)
        stats = replace(stats, copied=stats.copied + 1)
    return stats


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--source", choices=BACKENDS, required=True, help="Backend de origem.")
    parser.add_argument("--target", choices=BACKENDS, required=True, help="Backend de destino.")
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Grava no destino. Sem esta flag executa dry-run.",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Sobrescreve chaves já existentes no destino.",
    )
    args = parser.parse_args(argv)
    if args.source == args.target:
        parser.error("--source e --target devem ser diferentes")
    return args


async def _run(args: argparse.Namespace) -> MigrationStats:
    options = get_server_options()
    source = create_token_store(
        replace(options, token_store=replace(options.token_store, backend=args.source))
    )
    target = create_token_store(
        replace(options, token_store=replace(options.token_store, backend=args.target))
    )
    try:
        return await migrate_tokens(source, target, apply=args.apply, overwrite=args.overwrite)
    finally:
        await source.close()
        await target.close()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    stats = asyncio.run(_run(args))
    mode = "apply" if args.apply else "dry-run"
    print(
        f"[{mode}] scanned={stats.scanned} copied={stats.copied} "
        f"skipped_existing={stats.skipped_existing} corrupt={stats.corrupt}"
    )


if __name__ == "__main__":
    main()
