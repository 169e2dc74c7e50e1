"""Primitivas de imagem usadas na comparação.

Todas as funções operam sobre ``numpy.ndarray`` no formato ``(altura, largura, 3)``
com ``dtype=uint8`` e canais em ordem RGB.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import cv2
import numpy as np
from PIL import Image

LOGGER = logging.getLogger(__name__)

WHITE = 255


@dataclass
class Region:
    """Região contígua de pixels diferentes, representada pelo círculo mínimo que a envolve."""

    center_x: float
    center_y: float
    radius: float


def load_image(path: str | Path) -> Optional[np.ndarray]:
    """Lê uma imagem do disco; retorna ``None`` se não existir ou não puder ser decodificada."""

    try:
        with Image.open(path) as image:
            return np.array(image.convert("RGB"), dtype=np.uint8)
    except (OSError, Image.DecompressionBombError) as exc:
        LOGGER.warning("Não foi possível carregar a imagem", extra={"path": str(path), "reason": str(exc)})
        return None


def blank_image(width: int, height: int) -> np.ndarray:
    return np.full((height, width, 3), WHITE, dtype=np.uint8)


def size_of(image: np.ndarray) -> Tuple[int, int]:
    """Retorna ``(largura, altura)``."""

    return image.shape[1], image.shape[0]


def resize(image: np.ndarray, width: int, height: int) -> np.ndarray:
    if size_of(image) == (width, height):
        return image
    resized = Image.fromarray(image).resize((width, height), Image.BILINEAR)
    return np.array(resized, dtype=np.uint8)


def absolute_difference(reference: np.ndarray, current: np.ndarray) -> np.ndarray:
    """Mapa de diferença colorido: ``|referência - atual|`` por canal."""

    if reference.shape != current.shape:
        raise ValueError(
            f"As imagens devem ter o mesmo tamanho: {reference.shape} != {current.shape}"
        )
    return cv2.absdiff(reference, current)


def to_grayscale(diff: np.ndarray) -> np.ndarray:
    return cv2.cvtColor(diff, cv2.COLOR_RGB2GRAY)


def binarize(gray: np.ndarray, floor: int = 1) -> np.ndarray:
    """Máscara binária: 255 onde a intensidade da diferença é ``>= floor``."""

    return np.where(gray >= floor, 255, 0).astype(np.uint8)


def find_regions(mask: np.ndarray) -> List[Region]:
    """Detecta apenas contornos externos e os reduz ao círculo envolvente mínimo."""

    contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
    regions = []
    for contour in contours:
        (x, y), radius = cv2.minEnclosingCircle(contour)
        regions.append(Region(center_x=float(x), center_y=float(y), radius=float(radius)))
    return regions


def draw_regions(
    image: np.ndarray,
    regions: Iterable[Region],
    color: Tuple[int, int, int] = (255, 0, 0),
    thickness: int = 2,
) -> np.ndarray:
    """Desenha os círculos numa cópia da imagem; a original não é alterada."""

    annotated = np.ascontiguousarray(image).copy()
    for region in regions:
        center = (int(round(region.center_x)), int(round(region.center_y)))
        cv2.circle(annotated, center, int(region.radius), tuple(int(c) for c in color), thickness)
    return annotated


def build_composite(reference: np.ndarray, annotated: np.ndarray, diff: np.ndarray) -> np.ndarray:
    """Monta ``[referência | atual anotada | diferença]`` lado a lado."""

    height, width = reference.shape[:2]
    canvas = np.zeros((height, width * 3, 3), dtype=np.uint8)
    canvas[:, :width] = reference
    canvas[:, width : width * 2] = annotated
    canvas[:, width * 2 :] = diff
    return canvas


def save_image(image: np.ndarray, path: str | Path) -> None:
    """Grava a imagem; o formato é inferido pela extensão do arquivo."""

    Image.fromarray(image).save(path)
