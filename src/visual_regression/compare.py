"""Comparação visual entre uma imagem de referência e uma imagem atual.

Chamadas simultâneas com caminhos distintos são independentes. Duas chamadas que
gravam no mesmo ``diff_output_path`` concorrem pela gravação final; cabe ao
chamador serializá-las.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import numpy as np

from . import imaging
from .config import ComparisonConfig, MissingImagePolicy, ResizePolicy
from .imaging import Region

LOGGER = logging.getLogger(__name__)


@dataclass
class ComparisonResult:
    """Resultado de uma comparação.

    Pode ser desempacotado como ``match, diff_percentage = resultado``.
    """

    match: bool
    diff_percentage: float
    diff_pixels: int = 0
    total_pixels: int = 0
    regions: List[Region] = field(default_factory=list)
    diff_path: Optional[str] = None
    error: Optional[str] = None

    @property
    def similarity(self) -> float:
        return max(0.0, min(1.0, 1.0 - self.diff_percentage / 100.0))

    def __iter__(self) -> Iterator:
        yield self.match
        yield self.diff_percentage


@dataclass
class _Measurement:
    reference: np.ndarray
    current: np.ndarray
    diff: np.ndarray
    mask: np.ndarray
    diff_pixels: int
    total_pixels: int

    @property
    def percentage(self) -> float:
        return 100.0 * self.diff_pixels / self.total_pixels


class ImageComparator:
    """Compara duas imagens pixel a pixel e gera um composto destacando as diferenças."""

    def __init__(self, config: ComparisonConfig | None = None) -> None:
        self.config = config or ComparisonConfig()

    def compare(
        self,
        reference_path: str | Path,
        current_path: str | Path,
        diff_output_path: str | Path,
        threshold: float | None = None,
    ) -> ComparisonResult:
        """Compara as imagens e grava o composto de diferenças se não coincidirem.

        Parameters
        ----------
        reference_path:
            Imagem de referência (baseline).
        current_path:
            Imagem atual, sob teste.
        diff_output_path:
            Destino do composto ``[referência | atual anotada | diferença]``,
            gravado apenas quando as imagens não coincidem.
        threshold:
            Limiar na convenção de ``config.threshold_convention``. ``None`` usa
            o valor configurado.

        Returns
        -------
        ComparisonResult
            Veredito, percentual de diferença e regiões encontradas.

        Raises
        ------
        ValueError
            Se o limiar for inválido para a convenção configurada.
        """

        allowed = self.config.allowed_percentage(threshold)
        measured = self._measure(reference_path, current_path, self.config)
        if isinstance(measured, ComparisonResult):
            return measured

        result = self._decide(measured, allowed)
        if result.match:
            LOGGER.info("Imagens coincidem dentro do limiar", extra={"allowed_percentage": allowed})
            return result

        LOGGER.info("Imagens não coincidem, gerando imagem de diferenças")
        output = Path(diff_output_path)
        self._ensure_parent(output)

        result.regions = imaging.find_regions(measured.mask)
        annotated = imaging.draw_regions(
            measured.current,
            result.regions,
            color=self.config.circle.color,
            thickness=self.config.circle.thickness,
        )
        composite = imaging.build_composite(measured.reference, annotated, measured.diff)

        try:
            imaging.save_image(composite, output)
        except (OSError, ValueError) as exc:
            LOGGER.error("Falha ao salvar a imagem de diferenças", extra={"output": str(output), "reason": str(exc)})
            result.error = f"Falha ao salvar a imagem de diferenças: {exc}"
        else:
            LOGGER.info("Imagem de diferenças salva", extra={"output": str(output)})
            result.diff_path = str(output)
        return result

    def is_similar(
        self,
        reference_path: str | Path,
        current_path: str | Path,
        threshold: float | None = None,
    ) -> bool:
        """Verificação rápida, sem gerar arquivos.

        Falha se alguma imagem não puder ser carregada e reduz ambas ao menor
        tamanho comum antes de comparar.
        """

        allowed = self.config.allowed_percentage(threshold)
        measured = self._measure(reference_path, current_path, self.config.strict())
        if isinstance(measured, ComparisonResult):
            return False
        return self._decide(measured, allowed).match

    def _decide(self, measured: _Measurement, allowed: float) -> ComparisonResult:
        percentage = measured.percentage
        LOGGER.info(
            "Percentual de diferença: %.5f%% (%d pixels diferentes)",
            percentage,
            measured.diff_pixels,
            extra={"diff_percentage": percentage, "diff_pixels": measured.diff_pixels},
        )
        return ComparisonResult(
            match=percentage <= allowed,
            diff_percentage=percentage,
            diff_pixels=measured.diff_pixels,
            total_pixels=measured.total_pixels,
        )

    def _measure(
        self,
        reference_path: str | Path,
        current_path: str | Path,
        config: ComparisonConfig,
    ) -> _Measurement | ComparisonResult:
        images = self._load_pair(reference_path, current_path, config)
        if images is None:
            return ComparisonResult(
                match=False,
                diff_percentage=100.0,
                error=f"Falha ao carregar as imagens: {reference_path}, {current_path}",
            )

        reference, current = self._reconcile(*images, config.resize_policy)
        diff = imaging.absolute_difference(reference, current)
        mask = imaging.binarize(imaging.to_grayscale(diff), config.sensitivity_floor)
        return _Measurement(
            reference=reference,
            current=current,
            diff=diff,
            mask=mask,
            diff_pixels=int(np.count_nonzero(mask)),
            total_pixels=int(mask.size),
        )

    def _load_pair(
        self,
        reference_path: str | Path,
        current_path: str | Path,
        config: ComparisonConfig,
    ) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        reference = imaging.load_image(reference_path)
        current = imaging.load_image(current_path)

        if reference is not None and current is not None:
            return reference, current

        if config.missing_image is MissingImagePolicy.FAIL:
            LOGGER.error("Não foi possível carregar uma ou ambas as imagens")
            return None

        if reference is None and current is None:
            LOGGER.warning("Ambas as imagens ausentes, comparando duas imagens brancas")
            width, height = config.placeholder_width, config.placeholder_height
            return imaging.blank_image(width, height), imaging.blank_image(width, height)

        if reference is None:
            LOGGER.warning("Referência ausente, usando imagem branca do tamanho da atual")
            return imaging.blank_image(*imaging.size_of(current)), current

        LOGGER.warning("Imagem atual ausente, usando imagem branca do tamanho da referência")
        return reference, imaging.blank_image(*imaging.size_of(reference))

    def _reconcile(
        self,
        reference: np.ndarray,
        current: np.ndarray,
        policy: ResizePolicy,
    ) -> Tuple[np.ndarray, np.ndarray]:
        ref_size = imaging.size_of(reference)
        cur_size = imaging.size_of(current)
        if ref_size == cur_size:
            return reference, current

        if policy is ResizePolicy.MATCH_REFERENCE:
            LOGGER.warning(
                "Tamanhos diferentes, redimensionando a imagem atual para o tamanho da referência",
                extra={"reference_size": ref_size, "current_size": cur_size},
            )
            return reference, imaging.resize(current, *ref_size)

        target = (min(ref_size[0], cur_size[0]), min(ref_size[1], cur_size[1]))
        LOGGER.warning(
            "Tamanhos diferentes, redimensionando ambas para o menor tamanho comum",
            extra={"reference_size": ref_size, "current_size": cur_size, "target_size": target},
        )
        return imaging.resize(reference, *target), imaging.resize(current, *target)

    def _ensure_parent(self, output: Path) -> None:
        parent = output.parent
        if parent.exists():
            return
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            LOGGER.error("Falha ao criar diretório", extra={"directory": str(parent), "reason": str(exc)})
        else:
            LOGGER.info("Diretório criado", extra={"directory": str(parent.resolve())})


def compare_images(
    reference_path: str | Path,
    current_path: str | Path,
    diff_output_path: str | Path,
    threshold: float | None = None,
    config: ComparisonConfig | None = None,
) -> ComparisonResult:
    """Atalho para ``ImageComparator(config).compare(...)``."""

    return ImageComparator(config).compare(reference_path, current_path, diff_output_path, threshold)


def images_similar(
    reference_path: str | Path,
    current_path: str | Path,
    threshold: float | None = None,
    config: ComparisonConfig | None = None,
) -> bool:
    return ImageComparator(config).is_similar(reference_path, current_path, threshold)
