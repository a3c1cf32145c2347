# ramais/infrastructure/overrides_store.py
#
# Persistence of runtime edits as an "overrides" JSON file on top of the
# read-only base dataset.
#
# Design decisions:
#   - The whole override list is rewritten on every mutation (snapshot, not an
#     append log). The file stays small: one entry per edited setor.
#   - Every write is followed by an identical timestamped copy in the backups
#     directory, pruned first by age (retention_days, 0 = disabled) and then by
#     count (max_backups, newest kept).
#   - Durability is best-effort: every filesystem error is logged and swallowed
#     so a full disk never turns an in-memory edit into a failed request.
#   - The overrides file is written through a .tmp sibling and renamed, so a
#     crash mid-write leaves the previous snapshot intact.
from __future__ import annotations

import json
import os
import time
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .log import log

_SEGUNDOS_POR_DIA = 24 * 60 * 60


class OverridesStore:
    def __init__(
        self,
        overrides_path: Path,
        backups_dir: Path,
        *,
        max_backups: int = 20,
        retention_days: int = 0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._path = overrides_path
        self._backups_dir = backups_dir
        self._max_backups = max(1, max_backups)
        self._retention_days = max(0, retention_days)
        self._clock = clock
        for directory in (overrides_path.parent, backups_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as err:
                log(f"Falha ao criar diretorio {directory}: {err}")

    @property
    def path(self) -> Path:
        return self._path

    def carregar(self) -> list[dict[str, Any]]:
        """Le o arquivo de overrides. Arquivo ausente ou invalido vira []."""
        if not self._path.exists():
            return []
        try:
            dados = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as err:
            log(f"Falha ao ler overrides {self._path}: {err}")
            return []
        if not isinstance(dados, list):
            return []
        return [o for o in dados if isinstance(o, dict) and isinstance(o.get("slug"), str)]

    def upsert(self, entrada: Mapping[str, Any]) -> None:
        """Mescla `entrada` na entrada de mesmo slug (ou anexa) e persiste."""
        overrides = self.carregar()
        slug = entrada["slug"]
        for i, existente in enumerate(overrides):
            if existente.get("slug") == slug:
                overrides[i] = {**existente, **entrada}
                break
        else:
            overrides.append(dict(entrada))
        self.persistir(overrides)

    def persistir(self, overrides: Sequence[Mapping[str, Any]]) -> bool:
        """Grava o snapshot completo + backup. Retorna False se a gravacao falhou."""
        try:
            payload = json.dumps(list(overrides), ensure_ascii=False, indent=2)
            tmp_path = self._path.with_suffix(".tmp.json")
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self._path)

            backup_path = self._backups_dir / f"setores_overrides-{self._timestamp()}.json"
            backup_path.write_text(payload, encoding="utf-8")
        except OSError as err:
            log(f"Falha ao gravar overrides/backup: {err}")
            return False

        try:
            self._podar_backups()
        except OSError as err:
            log(f"Falha ao podar backups em {self._backups_dir}: {err}")
        return True

    def status(self) -> dict[str, Any]:
        backups = self._listar_backups()
        return {
            "overrides_path": str(self._path),
            "overrides_exists": self._path.exists(),
            "overrides_count": len(self.carregar()),
            "backups_dir": str(self._backups_dir),
            "backups_count": len(backups),
            "last_backup": backups[0][0].name if backups else None,
            "writable": os.access(self._backups_dir, os.W_OK),
            "max_backups": self._max_backups,
            "retention_days": self._retention_days,
        }

    def _timestamp(self) -> str:
        agora = datetime.fromtimestamp(self._clock(), tz=timezone.utc)
        return agora.isoformat(timespec="microseconds").replace(":", "-").replace(".", "-")

    def _listar_backups(self) -> list[tuple[Path, float]]:
        """Backups .json ordenados do mais novo para o mais antigo (mtime)."""
        if not self._backups_dir.exists():
            return []
        arquivos = [(p, p.stat().st_mtime) for p in self._backups_dir.glob("*.json")]
        return sorted(arquivos, key=lambda item: item[1], reverse=True)

    def _podar_backups(self) -> None:
        if self._retention_days > 0:
            corte = self._clock() - self._retention_days * _SEGUNDOS_POR_DIA
            for path, mtime in self._listar_backups():
                if mtime < corte:
                    path.unlink(missing_ok=True)

        restantes = self._listar_backups()
        for path, _mtime in restantes[self._max_backups:]:
            path.unlink(missing_ok=True)
