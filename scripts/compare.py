"""Script para comparar uma captura de tela com a imagem de referência."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from visual_regression import ComparisonConfig, ImageComparator, configure_logging, load_config
from visual_regression.utils import result_to_row, save_metrics


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Comparar a imagem atual com a imagem de referência")
    parser.add_argument("--reference", type=Path, required=True, help="Imagem de referência (baseline)")
    parser.add_argument("--current", type=Path, required=True, help="Imagem atual a ser verificada")
    parser.add_argument(
        "--diff-output",
        type=Path,
        default=Path("diffs/diff.png"),
        help="Onde salvar o composto de diferenças (padrao: diffs/diff.png)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Limiar na convenção configurada (padrao: valor do arquivo de configuracao)",
    )
    parser.add_argument("--config", type=Path, default=None, help="Arquivo de configuracao YAML")
    parser.add_argument(
        "--similar-only",
        action="store_true",
        help="Apenas verifica a similaridade, sem gerar imagem de diferenças",
    )
    parser.add_argument("--metrics-file", type=Path, default=None, help="CSV onde registrar o resultado")
    parser.add_argument("--log-level", default="INFO", help="Nivel de log (padrao: INFO)")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    configure_logging(args.log_level)
    try:
        cfg = load_config(args.config) if args.config else ComparisonConfig()
        comparator = ImageComparator(cfg)
        if args.similar_only:
            match = comparator.is_similar(args.reference, args.current, args.threshold)
            print(f"Resultado: {'OK' if match else 'DIFERENTE'}")
            sys.exit(0 if match else 1)

        result = comparator.compare(args.reference, args.current, args.diff_output, args.threshold)
    except ValueError as exc:
        print(f"Erro: {exc}", file=sys.stderr)
        sys.exit(2)

    print(f"Resultado: {'OK' if result.match else 'DIFERENTE'}")
    print(f"  Diferença: {result.diff_percentage:.5f}% ({result.diff_pixels} pixels)")
    if result.diff_path:
        print(f"  Imagem de diferenças: {result.diff_path}")
    if result.error:
        print(f"  Aviso: {result.error}")

    if args.metrics_file:
        save_metrics(result_to_row(result, args.reference, args.current), args.metrics_file)

    sys.exit(0 if result.match else 1)


if __name__ == "__main__":
    main()
