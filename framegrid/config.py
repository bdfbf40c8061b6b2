"""Настройки приложения.

Все значения имеют разумные умолчания; любое поле можно переопределить
переменной окружения `FRAMEGRID_<ИМЯ_ПОЛЯ>` (например `FRAMEGRID_MAX_DISPLAY_WIDTH=1024`).
"""
from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

LOG = logging.getLogger(__name__)

ENV_PREFIX = "FRAMEGRID_"


@dataclass(frozen=True)
class AppConfig:
    max_display_width: int = 800
    max_display_height: int = 600
    handle_size: float = 10.0
    # images wider than this are treated as print scans
    print_width_threshold: int = 800
    screen_dpi: int = 72
    print_dpi: int = 300
    frame_interval: float = 0.2
    preview_max_width: int = 200
    preview_duration: float = 2.0
    archive_name: str = "image_sequence.zip"
    animation_name: str = "animation.gif"
    export_timeout: float = 30.0
    default_grid_horizontal: int = 5
    default_grid_vertical: int = 5

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Собирает конфигурацию из переменных окружения поверх умолчаний.

        Некорректные значения игнорируются с предупреждением в лог.
        Все числовые поля (размеры, DPI, интервалы, таймаут, сетка) должны быть
        конечными и строго положительными.
        """
        env = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            type_name = f.type if isinstance(f.type, str) else f.type.__name__
            caster = {"int": int, "float": float, "str": str}[type_name]
            try:
                value = caster(raw)
            except ValueError:
                LOG.warning("Ignoring %s%s=%r: expected %s", ENV_PREFIX, f.name.upper(), raw, type_name)
                continue
            if type_name != "str" and not (math.isfinite(value) and value > 0):
                LOG.warning("Ignoring %s%s=%r: must be a positive number", ENV_PREFIX, f.name.upper(), raw)
                continue
            overrides[f.name] = value
        return cls(**overrides)
