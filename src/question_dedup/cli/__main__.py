"""CLI entry point: python -m question_dedup.cli {cluster,split,merge}"""

import argparse
import sys
from pathlib import Path

import structlog

from question_dedup.clustering import (
    cluster_questions_by_similarity,
    merge_clusters,
    split_cluster,
    split_cluster_auto,
)
from question_dedup.clustering.config import ClusteringConfig, load_clustering_config
from question_dedup.config.settings import get_settings
from question_dedup.ingestion.pairs_loader import (
    dump_models,
    load_clusters,
    load_similarity_pairs,
)
from question_dedup.logging_config import configure_from_settings
from question_dedup.models.cluster import QuestionCluster


def _write_output(content: str, output: str | None) -> None:
    if output is None:
        sys.stdout.write(content + "\n")
        return
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content + "\n", encoding="utf-8")
    structlog.get_logger().info("output_written", path=str(path))


def _select_clusters(clusters: list[QuestionCluster], ids: list[str]) -> list[QuestionCluster]:
    by_id = {c.id: c for c in clusters}
    missing = [cid for cid in ids if cid not in by_id]
    if missing:
        raise ValueError(f"Unknown cluster id(s): {', '.join(missing)}")
    return [by_id[cid] for cid in ids]


def run_cluster(args: argparse.Namespace, config: ClusteringConfig) -> str:
    """Cluster a pair file and return the clusters as JSON."""
    pairs = load_similarity_pairs(Path(args.pairs))
    threshold = config.threshold if args.threshold is None else args.threshold
    min_size = config.min_cluster_size if args.min_cluster_size is None else args.min_cluster_size

    clusters = cluster_questions_by_similarity(pairs, min_size, threshold)
    structlog.get_logger().info(
        "clustering_complete",
        pairs=len(pairs),
        clusters=len(clusters),
        threshold=threshold,
        min_cluster_size=min_size,
    )
    return dump_models(clusters)


def run_split(args: argparse.Namespace, config: ClusteringConfig) -> str:
    """Split one stored cluster and return its sub-clusters as JSON."""
    (cluster,) = _select_clusters(load_clusters(Path(args.clusters)), [args.cluster_id])
    pairs = load_similarity_pairs(Path(args.pairs))

    if args.auto:
        result = split_cluster_auto(cluster, pairs, config.split_min_cluster_size)
        threshold, children = result.threshold, result.clusters
    else:
        threshold = config.split_threshold if args.threshold is None else args.threshold
        children = split_cluster(cluster, pairs, threshold)

    structlog.get_logger().info(
        "split_complete",
        cluster_id=cluster.id,
        threshold=threshold,
        children=len(children),
    )
    return dump_models(children)


def run_merge(args: argparse.Namespace, config: ClusteringConfig) -> str:
    """Merge stored clusters and return the merged cluster as JSON."""
    selected = _select_clusters(load_clusters(Path(args.clusters)), args.cluster_id)
    pairs = load_similarity_pairs(Path(args.pairs))

    merged = merge_clusters(selected, pairs)
    structlog.get_logger().info(
        "merge_complete",
        merged_id=merged.id,
        sources=[c.id for c in selected],
        size=merged.size,
    )
    return dump_models(merged)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="question_dedup.cli",
        description="Near-duplicate question clustering CLI",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Clustering YAML config (default: from QUESTION_DEDUP_CLUSTERING_CONFIG_PATH)",
    )
    subparsers = parser.add_subparsers(dest="command")

    cluster_parser = subparsers.add_parser("cluster", help="Cluster similarity pairs")
    cluster_parser.add_argument("--pairs", required=True, help="JSON file of similarity pairs")
    cluster_parser.add_argument("--threshold", type=float, default=None)
    cluster_parser.add_argument("--min-cluster-size", type=int, default=None)
    cluster_parser.add_argument("--output", type=str, default=None, help="Output file (default: stdout)")

    split_parser = subparsers.add_parser("split", help="Split a stored cluster")
    split_parser.add_argument("--clusters", required=True, help="JSON file of stored clusters")
    split_parser.add_argument("--cluster-id", required=True)
    split_parser.add_argument("--pairs", required=True, help="JSON file of similarity pairs")
    mode = split_parser.add_mutually_exclusive_group()
    mode.add_argument("--threshold", type=float, default=None)
    mode.add_argument("--auto", action="store_true", help="Pick the split threshold automatically")
    split_parser.add_argument("--output", type=str, default=None)

    merge_parser = subparsers.add_parser("merge", help="Merge stored clusters")
    merge_parser.add_argument("--clusters", required=True, help="JSON file of stored clusters")
    merge_parser.add_argument("--cluster-id", required=True, action="append")
    merge_parser.add_argument("--pairs", required=True, help="JSON file of similarity pairs")
    merge_parser.add_argument("--output", type=str, default=None)

    return parser


_COMMANDS = {
    "cluster": run_cluster,
    "split": run_split,
    "merge": run_merge,
}


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    settings = get_settings()
    configure_from_settings(settings)
    config_path = Path(args.config) if args.config else settings.clustering_config_path

    try:
        config = load_clustering_config(config_path)
        content = _COMMANDS[args.command](args, config)
    except (OSError, ValueError) as e:
        structlog.get_logger().error("command_failed", command=args.command, error=str(e))
        parser.exit(2, f"error: {e}\n")

    _write_output(content, args.output)


if __name__ == "__main__":
    main()
