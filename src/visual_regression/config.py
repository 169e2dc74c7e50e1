"""Carregamento e validação das políticas de comparação."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Tuple

import yaml


class MissingImagePolicy(str, Enum):
    """O que fazer quando uma das imagens não pode ser carregada."""

    FAIL = "fail"
    SUBSTITUTE_WHITE = "substitute_white"


class ResizePolicy(str, Enum):
    """Como reconciliar imagens de tamanhos diferentes."""

    MATCH_REFERENCE = "match_reference"
    MATCH_MINIMUM = "match_minimum"


class ThresholdConvention(str, Enum):
    """Interpretação do limiar informado pelo chamador."""

    ALLOWED_PERCENT = "allowed_percent"
    REQUIRED_SIMILARITY = "required_similarity"


@dataclass
class CircleStyle:
    """Traço usado para marcar as regiões diferentes."""

    color: Tuple[int, int, int] = (255, 0, 0)
    thickness: int = 2


@dataclass
class ComparisonConfig:
    """Configuração completa de uma comparação."""

    missing_image: MissingImagePolicy = MissingImagePolicy.SUBSTITUTE_WHITE
    resize_policy: ResizePolicy = ResizePolicy.MATCH_REFERENCE
    threshold_convention: ThresholdConvention = ThresholdConvention.ALLOWED_PERCENT
    threshold: float = 0.0
    sensitivity_floor: int = 1
    placeholder_width: int = 1920
    placeholder_height: int = 1080
    circle: CircleStyle = field(default_factory=CircleStyle)

    def allowed_percentage(self, threshold: float | None = None) -> float:
        """Converte o limiar do chamador em percentual de diferença permitido.

        Parameters
        ----------
        threshold:
            Valor na convenção configurada. ``None`` usa ``self.threshold``.

        Returns
        -------
        float
            Percentual (0–100) de pixels que podem diferir.

        Raises
        ------
        ValueError
            Se o valor for negativo, ``NaN`` ou exceder o intervalo da convenção.
        """

        value = self.threshold if threshold is None else threshold
        try:
            value = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Limiar inválido: {value!r}") from exc

        if math.isnan(value) or value < 0:
            raise ValueError(f"Limiar inválido: {value!r} (deve ser >= 0).")

        if self.threshold_convention is ThresholdConvention.REQUIRED_SIMILARITY:
            if value > 1:
                raise ValueError(
                    f"Similaridade exigida deve estar entre 0 e 1, recebido {value!r}."
                )
            return round(100.0 - value * 100.0, 9)

        if value > 100:
            raise ValueError(
                f"Percentual de diferença permitido deve estar entre 0 e 100, recebido {value!r}."
            )
        return value

    def strict(self) -> "ComparisonConfig":
        """Variante usada na verificação rápida (falha em imagem ausente, menor tamanho comum)."""

        return replace(
            self,
            missing_image=MissingImagePolicy.FAIL,
            resize_policy=ResizePolicy.MATCH_MINIMUM,
        )


def _as_enum(enum_cls, value, name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as exc:
        options = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"Valor inválido para '{name}': {value!r} (opções: {options}).") from exc


def _build_circle(data: dict) -> CircleStyle:
    color = tuple(int(channel) for channel in data.get("color", (255, 0, 0)))
    if len(color) != 3 or any(channel < 0 or channel > 255 for channel in color):
        raise ValueError(f"Cor inválida para o círculo: {data.get('color')!r}")

    thickness = int(data.get("thickness", 2))
    if thickness < 1:
        raise ValueError("A espessura do círculo deve ser >= 1.")
    return CircleStyle(color=color, thickness=thickness)


def _build_config(data: dict) -> ComparisonConfig:
    data = dict(data or {})

    config = ComparisonConfig(
        missing_image=_as_enum(
            MissingImagePolicy, data.get("missing_image", "substitute_white"), "missing_image"
        ),
        resize_policy=_as_enum(
            ResizePolicy, data.get("resize_policy", "match_reference"), "resize_policy"
        ),
        threshold_convention=_as_enum(
            ThresholdConvention,
            data.get("threshold_convention", "allowed_percent"),
            "threshold_convention",
        ),
        threshold=float(data.get("threshold", 0.0)),
        sensitivity_floor=int(data.get("sensitivity_floor", 1)),
        placeholder_width=int(data.get("placeholder_width", 1920)),
        placeholder_height=int(data.get("placeholder_height", 1080)),
        circle=_build_circle(data.get("circle", {})),
    )

    if not 1 <= config.sensitivity_floor <= 255:
        raise ValueError("sensitivity_floor deve estar entre 1 e 255.")
    if config.placeholder_width < 1 or config.placeholder_height < 1:
        raise ValueError("As dimensões do placeholder devem ser positivas.")

    # valida o limiar padrão já na carga
    config.allowed_percentage()
    return config


def load_config(path: str | Path) -> ComparisonConfig:
    """Carrega configuração YAML e converte em dataclasses."""

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _build_config(data)
